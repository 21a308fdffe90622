"""
Reverse geocoding client (HeartRails Geo API, searchByGeoLocation).

Resolves the address of a clicked map point. See
https://geoapi.heartrails.com/api.html for the response contract.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import get_settings
from app.core.exceptions import GeocodingError
from app.schemas.map import ReverseGeocodeData

logger = logging.getLogger(__name__)


def _parse_location(data: Dict[str, Any]) -> Optional[ReverseGeocodeData]:
    """First location of a searchByGeoLocation response, or None when the point has no match."""
    response = data.get("response") or {}
    locations = response.get("location") or []
    if not locations:
        return None
    loc = locations[0]
    prefecture = loc.get("prefecture") or ""
    city = loc.get("city") or ""
    town = loc.get("town") or ""
    return ReverseGeocodeData(
        prefecture=prefecture,
        city=city,
        town=town,
        postal=loc.get("postal") or "",
        address=f"{prefecture}{city}{town}",
    )


async def reverse_geocode(
    latitude: float,
    longitude: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[ReverseGeocodeData]:
    """
    GET {GEOCODER_API_BASE_URL}?method=searchByGeoLocation&x={longitude}&y={latitude}.

    Returns the nearest address, or None when the geocoder reports no location
    (e.g. a point at sea). Raises GeocodingError on transport or HTTP errors.
    transport replaces the network transport (tests pass an httpx.MockTransport).
    """
    s = get_settings()
    params = {"method": "searchByGeoLocation", "x": longitude, "y": latitude}
    try:
        async with httpx.AsyncClient(timeout=s.GEOCODER_TIMEOUT_SECONDS, transport=transport) as client:
            resp = await client.get(s.GEOCODER_API_BASE_URL, params=params)
    except httpx.HTTPError as e:
        logger.warning("Reverse geocoding request failed for (%s, %s): %s", latitude, longitude, e)
        raise GeocodingError(f"Reverse geocoding request failed: {e}") from e

    if resp.status_code != 200:
        raise GeocodingError(
            f"Reverse geocoding failed: {resp.status_code}",
            upstream_status=resp.status_code,
            body=resp.text,
        )
    result = _parse_location(resp.json())
    if result is None:
        logger.info("No address found for (%s, %s)", latitude, longitude)
    return result
