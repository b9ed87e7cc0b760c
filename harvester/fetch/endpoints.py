"""URL builders for the Summer of Making endpoints."""
from harvester.config import config

DEFAULT_HEADERS = {
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate, br",
    "Pragma": "no-cache",
    "Cache-Control": "no-cache",
}


def request_headers(user_agent: str | None = None) -> dict[str, str]:
    """Fixed identifying headers sent with every request."""
    headers = {"User-Agent": user_agent or config.USER_AGENT}
    headers.update(DEFAULT_HEADERS)
    return headers


def page_url(base_url: str, page: int) -> str:
    """Base URLs end with the page query parameter, e.g. `...?page=`."""
    return f"{base_url}{page}"
