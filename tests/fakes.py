"""Scripted HTTP API and a sleep that only records waits."""
from typing import Any, Callable, Union

import httpx


Scripted = Union[dict, list, int, Exception, Callable[[httpx.Request], httpx.Response]]


class RecordingSleep:
    """Stands in for asyncio.sleep."""

    def __init__(self):
        self.waits: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.waits.append(seconds)


class FakeApi:
    """Serves scripted responses per page number.

    Each page has a queue; the last entry is repeated once the queue runs dry.
    Entries: dict/list -> 200 JSON, int -> bare status, Exception -> raised,
    callable -> called with the request.
    """

    def __init__(self, pages: dict[int, list[Scripted]], default: Scripted = None):
        self.script = {page: list(entries) for page, entries in pages.items()}
        self.default = default if default is not None else {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        page = int(request.url.params.get("page", "1"))
        queue = self.script.get(page)
        if not queue:
            entry = self.default
        elif len(queue) > 1:
            entry = queue.pop(0)
        else:
            entry = queue[0]
        return self._respond(entry, request)

    @staticmethod
    def _respond(entry: Any, request: httpx.Request) -> httpx.Response:
        if isinstance(entry, Exception):
            raise entry
        if isinstance(entry, int):
            return httpx.Response(entry)
        if callable(entry):
            return entry(request)
        return httpx.Response(200, json=entry)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def pages_requested(self) -> list[int]:
        return [int(r.url.params["page"]) for r in self.requests]

    def cookie_headers(self) -> list[str | None]:
        return [r.headers.get("cookie") for r in self.requests]


