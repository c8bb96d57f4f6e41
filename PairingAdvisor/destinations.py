"""Cruise itinerary locations and region filters."""
from typing import Dict, List, Optional, Sequence, Tuple

DEFAULT_LOCATION = "Cape Town, South Africa"
DEFAULT_COUNTRY = "South Africa"

CRUISE_DESTINATIONS = [
    "Cape Town, South Africa",
    "Stellenbosch, South Africa",
    "Franschhoek, South Africa",
    "Bordeaux, France",
    "Tuscany, Italy",
    "Barcelona, Spain",
    "Santorini, Greece",
    "Miami, USA",
    "Bridgetown, Barbados",
    "Montego Bay, Jamaica",
]

# region -> (city names, country names); a destination matches on either
REGIONS: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...]]] = {
    "wine_regions": (("Stellenbosch", "Franschhoek", "Bordeaux", "Tuscany"), ()),
    "mediterranean": ((), ("Spain", "France", "Italy", "Greece")),
    "caribbean": (("Barbados", "Bridgetown", "Jamaica", "Montego Bay"), ("USA",)),
}


def split_location(location: str) -> Tuple[str, str]:
    """Split "City, Country" into its parts; country defaults to South Africa."""
    parts = [part.strip() for part in location.split(",", 1)]
    city = parts[0]
    country = parts[1] if len(parts) > 1 and parts[1] else DEFAULT_COUNTRY
    return city, country


def filter_destinations(
    region: str = "all",
    destinations: Optional[Sequence[str]] = None
) -> List[str]:
    """
    Return the destinations belonging to a region, keeping itinerary order.

    Raises:
        ValueError: If the region is unknown
    """
    destinations = list(CRUISE_DESTINATIONS if destinations is None else destinations)
    if region == "all":
        return destinations
    if region not in REGIONS:
        raise ValueError(f"Unknown region '{region}', expected one of: all, {', '.join(REGIONS)}")

    cities, countries = REGIONS[region]
    selected = []
    for location in destinations:
        city, country = split_location(location)
        if any(name in city for name in cities) or any(name in country for name in countries):
            selected.append(location)
    return selected
