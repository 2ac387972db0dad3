"""HTTP client abstraction for webhook delivery.

This module provides:
- HttpClient: Protocol for HTTP operations (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from appdist import __version__
from appdist.core.result import Err, Ok, Result

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations.

    This abstraction allows injecting mock clients for testing,
    avoiding real network calls in unit tests.
    """

    def post_json(self, url: str, payload: dict[str, Any]) -> Result[str, HttpError]:
        """POST ``payload`` as a JSON body.

        Args:
            url: Target URL
            payload: JSON-serialisable mapping

        Returns:
            Ok with the response body text, or Err with HttpError
        """
        ...


class RealHttpClient:
    """Real HTTP client using urllib with system certificates."""

    def __init__(self, timeout: float = 15.0, user_agent: str = f"appdist/{__version__}") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def post_json(self, url: str, payload: dict[str, Any]) -> Result[str, HttpError]:
        try:
            body = json.dumps(payload).encode("utf-8")
        except (TypeError, ValueError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON encode error: {e}"))

        try:
            req = urllib.request.Request(
                url,
                data=body,
                method="POST",
                headers={
                    "User-Agent": self.user_agent,
                    "Content-Type": "application/json; charset=utf-8",
                },
            )
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                return Ok(response.read().decode("utf-8", errors="replace"))
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=e.reason))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))


class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_response("https://hooks.example/x", "ok")
        client.post_json("https://hooks.example/x", {"text": "hi"})
        assert client.posts == [("https://hooks.example/x", {"text": "hi"})]
    """

    def __init__(self) -> None:
        self._responses: dict[str, str | HttpError] = {}
        self.posts: list[tuple[str, dict[str, Any]]] = []

    def set_response(self, url: str, response: str | HttpError) -> None:
        """Set the response returned for ``url``."""
        self._responses[url] = response

    def post_json(self, url: str, payload: dict[str, Any]) -> Result[str, HttpError]:
        self.posts.append((url, payload))

        if url not in self._responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._responses[url]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)
