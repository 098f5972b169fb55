"""
Stand-ins for aiohttp sessions and responses.

Routes map a URL substring to a MockResponse or to an exception that is
raised when a matching request is made.
"""

from typing import Any, Dict, List, Optional, Tuple, Union


class MockResponse:
    """Minimal aiohttp response usable as an async context manager."""

    def __init__(self, status: int = 200, json_data: Any = None, text: str = ""):
        self.status = status
        self._json = json_data
        self._text = text

    async def json(self) -> Any:
        return self._json

    async def text(self) -> str:
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


Route = Union[MockResponse, BaseException]


class MockSession:
    """Records requests and answers them from a route table."""

    def __init__(self, routes: Optional[Dict[str, Route]] = None):
        self.routes = routes or {}
        self.requests: List[Tuple[str, str, Dict[str, Any]]] = []

    def _respond(self, method: str, url: str, kwargs: Dict[str, Any]) -> MockResponse:
        self.requests.append((method, url, kwargs))
        for fragment, route in self.routes.items():
            if fragment in url:
                if isinstance(route, BaseException):
                    raise route
                return route
        return MockResponse(status=404)

    def get(self, url: str, **kwargs) -> MockResponse:
        return self._respond("GET", url, kwargs)

    def post(self, url: str, **kwargs) -> MockResponse:
        return self._respond("POST", url, kwargs)
