"""Session cookie jar that only ever adds or overwrites entries."""
import logging
import re
from typing import Any, Iterable

logger = logging.getLogger(__name__)

_SEPARATOR = re.compile(r";\s*")
_DELETED = re.compile(r"deleted", re.IGNORECASE)


class CookieJar:
    """Name -> value cookie store fed from Set-Cookie headers.

    Attributes such as Path, Domain or Expires are ignored. A Set-Cookie whose
    value is empty or looks like a deletion marker leaves the current entry
    untouched instead of removing it.
    """

    def __init__(self, cookies: dict[str, str] | None = None):
        self._cookies: dict[str, str] = {}
        if cookies:
            self.hydrate(cookies)

    def __len__(self) -> int:
        return len(self._cookies)

    def __contains__(self, name: str) -> bool:
        return name in self._cookies

    def get(self, name: str) -> str | None:
        return self._cookies.get(name)

    def names(self) -> list[str]:
        return list(self._cookies)

    def absorb(self, set_cookie_headers: Iterable[str]) -> None:
        """Store the name=value pair from each Set-Cookie header."""
        for header in set_cookie_headers:
            name_value = _SEPARATOR.split(header, maxsplit=1)[0]
            if "=" not in name_value:
                continue
            name, value = name_value.split("=", 1)
            name = name.strip()
            value = value.strip()
            if not name:
                continue
            if value == "" or _DELETED.search(value):
                logger.debug(f"Ignoring deletion-looking Set-Cookie for {name}")
                continue
            self._cookies[name] = value

    def render_header(self) -> str:
        """Render the Cookie request header, empty when the jar is empty."""
        return "; ".join(f"{name}={value}" for name, value in self._cookies.items())

    def seed_from_header(self, header: str) -> None:
        """Load a `k1=v1; k2=v2` string as supplied on the command line."""
        if not header:
            return
        for pair in _SEPARATOR.split(header):
            if "=" not in pair:
                continue
            name, value = pair.split("=", 1)
            name = name.strip()
            if name:
                self._cookies[name] = value.strip()

    def to_dict(self) -> dict[str, str]:
        return dict(self._cookies)

    def hydrate(self, cookies: Any) -> None:
        """Merge a mapping restored from a checkpoint."""
        if not isinstance(cookies, dict):
            return
        for name, value in cookies.items():
            self._cookies[str(name)] = str(value)
