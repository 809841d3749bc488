"""Nominatim reverse geocoding over aiohttp."""

from __future__ import annotations

import json
import logging

import aiohttp
from pydantic import ValidationError

from teslamate_telegram._constants import NOMINATIM_URL, USER_AGENT
from teslamate_telegram.exceptions import GeocodeError
from teslamate_telegram.models.geocode import LookupResult

_logger = logging.getLogger(__name__)

_REVERSE_ENDPOINT = "/reverse"


class NominatimClient:
    """Reverse geocoder backed by a Nominatim instance.

    Instances are callable so they can be passed directly as the
    lookup capability of :class:`teslamate_telegram.places.PlaceResolver`.
    """

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        base_url: str = NOMINATIM_URL,
        timeout: float = 10.0,
    ) -> None:
        self._http = http_session
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def __call__(self, latitude: float, longitude: float) -> LookupResult:
        return await self.reverse(latitude, longitude)

    async def reverse(self, latitude: float, longitude: float) -> LookupResult:
        """Look up the feature nearest to the given coordinates."""
        params = {
            "lat": str(latitude),
            "lon": str(longitude),
            "format": "jsonv2",
            "addressdetails": "0",
        }
        url = f"{self._base_url}{_REVERSE_ENDPOINT}"
        _logger.debug("GET %s lat=%s lon=%s", url, latitude, longitude)

        try:
            async with self._http.get(
                url,
                params=params,
                headers={"user-agent": USER_AGENT},
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise GeocodeError(
                        f"HTTP {resp.status} from {_REVERSE_ENDPOINT}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=_REVERSE_ENDPOINT,
                    )
        except GeocodeError:
            raise
        except (aiohttp.ClientError, TimeoutError, UnicodeDecodeError) as exc:
            raise GeocodeError(
                f"Request to {_REVERSE_ENDPOINT} failed: {exc}",
                endpoint=_REVERSE_ENDPOINT,
            ) from exc

        try:
            body = json.loads(text)
        except json.JSONDecodeError as exc:
            raise GeocodeError(
                f"Invalid JSON from {_REVERSE_ENDPOINT}: {text[:200]}",
                endpoint=_REVERSE_ENDPOINT,
            ) from exc

        if not isinstance(body, dict):
            raise GeocodeError(f"Unexpected response from {_REVERSE_ENDPOINT}", endpoint=_REVERSE_ENDPOINT)
        if "error" in body:
            raise GeocodeError(f"Nominatim error: {body['error']}", endpoint=_REVERSE_ENDPOINT)

        try:
            return LookupResult.model_validate(body)
        except ValidationError as exc:
            raise GeocodeError(f"Malformed result from {_REVERSE_ENDPOINT}", endpoint=_REVERSE_ENDPOINT) from exc
