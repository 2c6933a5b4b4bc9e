"""Shared error handling for upstream HTTP APIs."""

import httpx


class UpstreamAPIError(Exception):
    """An upstream API answered with a non-2xx status."""

    def __init__(self, service: str, status_code: int, body: str) -> None:
        self.service = service
        self.status_code = status_code
        self.body = body
        super().__init__(f"{service} request failed with HTTP {status_code}: {body[:200]}")


def ensure_success(service: str, response: httpx.Response) -> None:
    """Raise UpstreamAPIError unless the response is 2xx."""
    if not response.is_success:
        raise UpstreamAPIError(service, response.status_code, response.text)
