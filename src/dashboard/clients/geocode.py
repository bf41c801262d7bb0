"""Address to coordinates through OpenStreetMap Nominatim (Korea only)."""

from src.dashboard.clients.http import fetch_json
from src.dashboard.errors import PermanentError
from src.dashboard.models import Coords

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"


def geocode_address(address: str) -> Coords | None:
    """First Nominatim match for ``address``, or None when nothing matches."""
    if not address.strip():
        return None
    results = fetch_json(
        NOMINATIM_URL,
        params={"q": address, "format": "json", "limit": 1, "countrycodes": "kr"},
        headers={"Accept-Language": "ko"},
    )
    if not results:
        return None
    try:
        return Coords(lat=float(results[0]["lat"]), lon=float(results[0]["lon"]))
    except (KeyError, TypeError, ValueError) as e:
        raise PermanentError(f"Unexpected geocode result: {results[0]!r}") from e
