"""HTTP collaborators for the countdown and the draw history.

The remote side exposes three endpoints:

    GET  COUNTDOWN_URL  -> {"seconds": 42}  or a plain-text "42"
    POST REFRESH_URL    -> any 2xx
    GET  DRAWS_URL      -> [{"drawId": "...", "numbers": ["3", ...], "drawTime": "..."}]
                           (optionally wrapped as {"data": [...]})
"""

import httpx
from loguru import logger
from pydantic import ValidationError

from cycle_predictor.config import Settings
from cycle_predictor.errors import InvalidCountdownValue, TransientReadError
from cycle_predictor.schemas.draw import DrawRecordSchema
from cycle_predictor.scraper.base import BaseCountdownSource, BaseDrawSource


def parse_countdown(response: httpx.Response) -> int:
    """Extract the countdown from a JSON or plain-text body."""
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            payload = response.json()
        except ValueError as e:
            raise InvalidCountdownValue(f"malformed countdown JSON: {e}") from e
        value = payload.get("seconds") if isinstance(payload, dict) else payload
    else:
        value = response.text.strip()

    if isinstance(value, bool):
        raise InvalidCountdownValue(f"countdown is not a number: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    raise InvalidCountdownValue(f"countdown is not a number: {value!r}")


def parse_draws(payload) -> list[DrawRecordSchema]:
    """Validate draw rows; malformed rows are skipped with a warning."""
    rows = payload.get("data", []) if isinstance(payload, dict) else payload
    if not isinstance(rows, list):
        raise TransientReadError(f"unexpected draws payload: {type(rows).__name__}")

    draws = []
    for row in rows:
        try:
            draws.append(DrawRecordSchema.model_validate(row))
        except ValidationError as e:
            logger.warning("Failed to parse draw row: {} - {}", row, e.errors()[0]["msg"])
    return draws


class HttpCountdownSource(BaseCountdownSource):
    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self.countdown_url = settings.COUNTDOWN_URL
        self.refresh_url = settings.REFRESH_URL
        self._client = client or httpx.AsyncClient(timeout=settings.COUNTDOWN_READ_TIMEOUT)

    async def read_countdown_seconds(self) -> int:
        try:
            response = await self._client.get(self.countdown_url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TransientReadError(f"countdown request failed: {e}") from e
        return parse_countdown(response)

    async def request_refresh(self) -> None:
        response = await self._client.post(self.refresh_url)
        response.raise_for_status()

    async def aclose(self) -> None:
        await self._client.aclose()


class HttpDrawSource(BaseDrawSource):
    source_name = "http"

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self.draws_url = settings.DRAWS_URL
        self.read_timeout = settings.INGEST_READ_TIMEOUT
        self._client = client or httpx.AsyncClient(timeout=settings.INGEST_READ_TIMEOUT)

    async def fetch_latest(self) -> list[DrawRecordSchema]:
        try:
            response = await self._client.get(self.draws_url)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TransientReadError(f"draw request failed: {e}") from e
        draws = parse_draws(payload)
        logger.debug("Fetched {} draws from {}", len(draws), self.draws_url)
        return draws

    async def aclose(self) -> None:
        await self._client.aclose()
