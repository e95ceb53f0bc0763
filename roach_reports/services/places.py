"""Address autocomplete and geocoding against a Google-Places-compatible API.

Autocomplete sessions are tracked by the caller: every call takes the
session token explicitly, and a details lookup ends the session.
"""
import logging
import uuid

import httpx

from roach_reports.config import settings
from roach_reports.utils.exceptions import UpstreamFailure

logger = logging.getLogger(__name__)

MIN_INPUT_LENGTH = 2
DETAILS_FIELDS = "address_component,formatted_address,geometry,place_id"
_OK_STATUSES = {"OK", "ZERO_RESULTS"}


def new_session_token() -> str:
    return str(uuid.uuid4())


def _component(components: list[dict], kind: str, short: bool = False) -> str | None:
    for component in components:
        if kind in component.get("types", []):
            return component.get("short_name" if short else "long_name")
    return None


def parse_place_details(result: dict) -> dict:
    components = result.get("address_components", [])
    location = result.get("geometry", {}).get("location", {})

    number = _component(components, "street_number")
    route = _component(components, "route")
    street = " ".join(part for part in (number, route) if part) or None

    city = (
        _component(components, "locality")
        or _component(components, "sublocality")
        or _component(components, "postal_town")
    )
    return {
        "place_id": result.get("place_id"),
        "formatted_address": result.get("formatted_address"),
        "address": street or result.get("formatted_address"),
        "city": city,
        "state": _component(components, "administrative_area_level_1", short=True),
        "zip": _component(components, "postal_code"),
        "latitude": location.get("lat"),
        "longitude": location.get("lng"),
    }


class PlacesClient:
    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def _get(self, path: str, params: dict) -> dict:
        if not self.enabled:
            raise UpstreamFailure("places service not configured")

        query = {k: v for k, v in params.items() if v is not None}
        query["key"] = self.api_key
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(path, params=query)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Places request %s failed with HTTP %s", path, e.response.status_code)
            raise UpstreamFailure(f"places service returned HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.warning("Places request %s failed: %s", path, e)
            raise UpstreamFailure(f"places service unavailable: {e}")
        except ValueError:
            raise UpstreamFailure("places service returned an invalid response")

        status = payload.get("status", "OK")
        if status not in _OK_STATUSES:
            message = payload.get("error_message") or status
            logger.warning("Places request %s returned status %s", path, status)
            raise UpstreamFailure(f"places service error: {message}")
        return payload

    async def autocomplete(self, text: str, session_token: str) -> list[dict]:
        if len(text.strip()) < MIN_INPUT_LENGTH:
            return []

        payload = await self._get(
            "/place/autocomplete/json",
            {
                "input": text,
                "sessiontoken": session_token,
                "types": "address",
                "components": "country:us",
            },
        )
        predictions = []
        for item in payload.get("predictions", []):
            formatting = item.get("structured_formatting", {})
            predictions.append({
                "place_id": item.get("place_id"),
                "description": item.get("description"),
                "main_text": formatting.get("main_text"),
                "secondary_text": formatting.get("secondary_text"),
            })
        return predictions

    async def details(self, place_id: str, session_token: str | None = None) -> dict:
        payload = await self._get(
            "/place/details/json",
            {"place_id": place_id, "sessiontoken": session_token, "fields": DETAILS_FIELDS},
        )
        result = payload.get("result")
        if not result:
            raise UpstreamFailure("places service returned no details")
        return parse_place_details(result)

    async def geocode(self, address: str) -> tuple[float, float] | None:
        payload = await self._get("/geocode/json", {"address": address})
        results = payload.get("results", [])
        if not results:
            return None
        location = results[0].get("geometry", {}).get("location", {})
        if location.get("lat") is None or location.get("lng") is None:
            return None
        return float(location["lat"]), float(location["lng"])


def get_places_client() -> PlacesClient:
    return PlacesClient(
        api_key=settings.places_api_key,
        base_url=settings.places_base_url,
        timeout=settings.places_timeout_seconds,
    )
