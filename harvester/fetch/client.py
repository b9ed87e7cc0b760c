"""HTTP client with capped exponential backoff and cookie capture."""
import asyncio
import logging
import re
from typing import Any, Awaitable, Callable, Optional, Sequence
import httpx
import orjson
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
)

from harvester.auth.cookies import CookieJar
from harvester.config import config
from harvester.fetch.endpoints import page_url, request_headers
from harvester.fetch.errors import (
    FetchError,
    FetchExhausted,
    NetworkError,
    RateLimited,
    TransientHTTPError,
)
from harvester.parse.models import PageResult

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

_LEADING_INT = re.compile(r"^\s*(\d+)")
MAX_REDIRECTS = 20


def parse_retry_after(value: Optional[str]) -> int:
    """Seconds from a Retry-After header; 0 when missing or not a number."""
    if not value:
        return 0
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


def backoff_seconds(retry: int, retry_after: float = 0) -> float:
    """Wait before retry number `retry` (0-based), never above the ceiling."""
    if retry_after > 0:
        return min(config.MAX_WAIT_SECONDS, retry_after)
    return min(config.MAX_WAIT_SECONDS, config.BASE_WAIT_SECONDS * 2 ** retry)


def _wait_for(retry_state: RetryCallState) -> float:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    retry_after = exc.retry_after if isinstance(exc, RateLimited) else 0
    return backoff_seconds(retry_state.attempt_number - 1, retry_after)


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception()
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    url = retry_state.kwargs.get("url") or (retry_state.args[0] if retry_state.args else "?")
    logger.warning(
        f"{exc} for {url}. Waiting {wait:g}s then retrying (attempt {retry_state.attempt_number})"
    )


class PageFetcher:
    """Fetches JSON pages one at a time, retrying rate limits and failures.

    Cookies come from and go back into the given jar on every response,
    including error responses.
    """

    def __init__(
        self,
        base_url: str,
        jar: CookieJar,
        records_fields: Sequence[str] = ("items",),
        max_retries: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.base_url = base_url
        self.jar = jar
        self.records_fields = tuple(records_fields)
        self.max_retries = config.MAX_RETRIES if max_retries is None else max_retries
        self._sleep = sleep
        self.client = httpx.AsyncClient(
            http2=transport is None,
            timeout=config.TIMEOUT,
            follow_redirects=False,
            transport=transport,
        )
        self.retry_count = 0
        self.backoff_time_total = 0.0
        self._attempts = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.client.aclose()

    async def _recording_sleep(self, seconds: float) -> None:
        self.retry_count += 1
        self.backoff_time_total += seconds
        await self._sleep(seconds)

    async def fetch_page(self, page: int) -> PageResult:
        """Fetch one page. Raises FetchExhausted after the last retry fails."""
        return await self.fetch_json(
            page_url(self.base_url, page),
            parse=lambda payload: PageResult.from_payload(payload, self.records_fields),
        )

    async def fetch_json(self, url: str, parse: Callable[[Any], Any] = lambda payload: payload) -> Any:
        """GET `url` and decode it with `parse`, retrying per the backoff policy."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=_wait_for,
            retry=retry_if_exception_type(FetchError),
            before_sleep=_log_retry,
            sleep=self._recording_sleep,
            reraise=True,
        )
        self._attempts = 0
        try:
            return await retrying(self._attempt, url=url, parse=parse)
        except FetchError as e:
            raise FetchExhausted(url, e, self._attempts) from e

    async def _attempt(self, url: str, parse: Callable[[Any], Any]) -> Any:
        self._attempts += 1
        response = await self._get_following_redirects(url)

        if response.status_code == 429:
            raise RateLimited(parse_retry_after(response.headers.get("retry-after")))
        if not response.is_success:
            raise TransientHTTPError(response.status_code)

        try:
            return parse(orjson.loads(response.content))
        except orjson.JSONDecodeError as e:
            raise NetworkError(f"invalid JSON body: {e}") from e
        except (ValidationError, ValueError) as e:
            raise NetworkError(f"unexpected body: {e}") from e

    async def _get_following_redirects(self, url: str) -> httpx.Response:
        """GET `url`, following redirects by hand so every hop sends the jar."""
        for _ in range(MAX_REDIRECTS + 1):
            headers = request_headers()
            cookie_header = self.jar.render_header()
            if cookie_header:
                headers["Cookie"] = cookie_header

            try:
                response = await self.client.get(url, headers=headers)
            except httpx.RequestError as e:
                raise NetworkError(str(e) or type(e).__name__) from e

            self.jar.absorb(response.headers.get_list("set-cookie"))
            # The jar is the only cookie store
            self.client.cookies.clear()

            location = response.headers.get("location")
            if not response.is_redirect or not location:
                return response
            url = str(response.url.join(location))
            logger.debug(f"Redirected to {url}")
        raise NetworkError(f"more than {MAX_REDIRECTS} redirects")
