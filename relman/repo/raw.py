"""Reading auxiliary files through a provider's raw-content URL.

Release tooling often needs one file of a repository (a release descriptor,
a POM) without paying for a clone. ``read_raw_file`` fetches it over HTTPS
using the target's raw URL and the provider's auth headers.

The HTTP layer is the injectable ``HttpClient`` protocol; ``UrllibHttpClient``
is the real implementation and ``MockHttpClient`` serves canned responses in
tests.
"""

from __future__ import annotations

import asyncio
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from relman.core.result import Err, Ok, Result
from relman.repo.errors import RepositoryAccessError
from relman.repo.target import RepositoryTarget

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "UrllibHttpClient",
    "read_raw_file",
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
    """Blocking text GET, run off the event loop by callers."""

    def get_text(self, url: str, headers: dict[str, str]) -> Result[str, HttpError]: ...


class UrllibHttpClient:
    """HTTP client using urllib with system certificates."""

    def __init__(self, timeout: float = 30.0, user_agent: str = "relman") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def get_text(self, url: str, headers: dict[str, str]) -> Result[str, HttpError]:
        try:
            req = urllib.request.Request(url, headers={"User-Agent": self.user_agent, **headers})
            with urllib.request.urlopen(req, timeout=self.timeout, context=self._ssl_context) as response:
                body: bytes = response.read()
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

        try:
            return Ok(body.decode("utf-8"))
        except UnicodeDecodeError as e:
            return Err(HttpError(url=url, status=0, message=f"Decode error: {e}"))


class MockHttpClient:
    """Canned responses keyed by URL; unknown URLs answer 404.

    Usage:
        client = MockHttpClient()
        client.set_text("https://raw.example.com/o/r/main/release.yml", "version: 1")
    """

    def __init__(self) -> None:
        self._responses: dict[str, str | HttpError] = {}
        self.calls: list[tuple[str, dict[str, str]]] = []

    def set_text(self, url: str, response: str | HttpError) -> None:
        self._responses[url] = response

    def get_text(self, url: str, headers: dict[str, str]) -> Result[str, HttpError]:
        self.calls.append((url, dict(headers)))
        response = self._responses.get(url)
        if response is None:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)


async def read_raw_file(
    target: RepositoryTarget,
    relative_path: str,
    *,
    client: HttpClient,
) -> Result[str, RepositoryAccessError]:
    """Fetch one file of the target's branch without cloning."""
    url = target.raw_url(relative_path)
    result = await asyncio.to_thread(client.get_text, url, target.provider.raw_headers())
    if isinstance(result, Err):
        return Err(
            RepositoryAccessError(
                target=str(target),
                operation="raw",
                message=str(result.error),
            )
        )
    return result
