"""Test doubles shared across test modules."""


class StubResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(self, status_code: int = 200, json_data=None, text: str = ""):
        self.status_code = status_code
        self._json = json_data
        self.text = text

    def json(self):
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json


class StubSession:
    """Answers ``get`` from a url -> response (or exception) map and records calls."""

    def __init__(self, routes: dict):
        self.routes = routes
        self.calls = []
        self.closed = False

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        response = self.routes[url]
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        self.closed = True
