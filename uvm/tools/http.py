"""HTTP client for release downloads.

This module provides:
- HttpClient: Protocol for fetching a URL body (injectable for tests)
- RealHttpClient: urllib implementation with strict TLS and proxy support
- MockHttpClient: In-memory implementation that records calls

TLS peers are always verified and hostnames checked. The CA bundle is the
configured ``cacertfile`` when given, the default trust store otherwise.

Proxies come from ``HTTP_PROXY``/``http_proxy`` (http URLs) or
``HTTPS_PROXY``/``https_proxy`` (https URLs); the uppercase name wins.
Credentials embedded as ``user:pass@host:port`` are sent as proxy basic
auth. ``NO_PROXY`` is not consulted.
"""

from __future__ import annotations

import base64
import os
import ssl
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable
from urllib.parse import unquote, urlsplit

from uvm.core.result import Err, Ok, Result

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "ProxySettings",
    "RealHttpClient",
    "build_ssl_context",
    "proxy_for_scheme",
    "parse_proxy",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network and TLS errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"couldn't fetch {self.url}: HTTP {self.status}: {self.message}"
        return f"couldn't fetch {self.url}: {self.message}"


@dataclass(frozen=True, slots=True)
class ProxySettings:
    """A proxy endpoint with optional basic-auth credentials.

    Attributes:
        endpoint: Proxy URL without credentials (e.g. "http://proxy:3128")
        host: Proxy host name
        port: Proxy port, if given
        username: Proxy user, if embedded in the URL
        password: Proxy password, if embedded in the URL
    """

    endpoint: str
    host: str
    port: int | None = None
    username: str | None = None
    password: str | None = None

    @property
    def authorization(self) -> str | None:
        """``Proxy-Authorization`` header value, or None without credentials."""
        if self.username is None or self.password is None:
            return None
        token = base64.b64encode(f"{self.username}:{self.password}".encode()).decode("ascii")
        return f"Basic {token}"


def proxy_for_scheme(scheme: str, environ: Mapping[str, str] | None = None) -> str | None:
    """Get the proxy URL configured for ``scheme`` ("http" or "https")."""
    env = os.environ if environ is None else environ
    if scheme == "http":
        return env.get("HTTP_PROXY") or env.get("http_proxy") or None
    if scheme == "https":
        return env.get("HTTPS_PROXY") or env.get("https_proxy") or None
    return None


def parse_proxy(proxy: str) -> ProxySettings | None:
    """Split a proxy URL into endpoint and credentials.

    Credentials are only used when the user-info has exactly the form
    ``user:pass``. A bare ``host:port`` is treated as an http proxy.

    Returns:
        ProxySettings, or None if no host can be found.
    """
    value = proxy.strip()
    if "://" not in value:
        value = f"http://{value}"

    parts = urlsplit(value)
    host = parts.hostname
    if not host:
        return None

    try:
        port = parts.port
    except ValueError:
        return None

    username: str | None = None
    password: str | None = None
    userinfo, sep, _ = parts.netloc.rpartition("@")
    if sep and userinfo.count(":") == 1:
        user, _, pw = userinfo.partition(":")
        username, password = unquote(user), unquote(pw)

    netloc = f"[{host}]" if ":" in host else host
    if port is not None:
        netloc = f"{netloc}:{port}"
    endpoint = f"{parts.scheme}://{netloc}"

    return ProxySettings(
        endpoint=endpoint,
        host=host,
        port=port,
        username=username,
        password=password,
    )


def build_ssl_context(cacertfile: Path | None = None) -> ssl.SSLContext:
    """Create a verifying client TLS context.

    Args:
        cacertfile: CA bundle to trust instead of the default store

    Raises:
        OSError: If ``cacertfile`` cannot be read
        ssl.SSLError: If ``cacertfile`` holds no usable certificates
    """
    if cacertfile is not None:
        context = ssl.create_default_context(cafile=str(cacertfile))
    else:
        context = ssl.create_default_context()
    context.verify_mode = ssl.CERT_REQUIRED
    context.check_hostname = True
    return context


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for fetching a release archive.

    This abstraction allows injecting mock clients for testing,
    avoiding real network calls in unit tests.
    """

    def get(self, url: str) -> Result[bytes, HttpError]:
        """Fetch ``url`` and return the body of a 200 response."""
        ...


class RealHttpClient:
    """Real HTTP client using urllib.

    Handles:
    - HTTPS with peer and hostname verification
    - Custom CA bundle
    - HTTP/HTTPS proxies from the environment, with basic auth
    """

    def __init__(
        self,
        *,
        cacertfile: Path | None = None,
        environ: Mapping[str, str] | None = None,
        timeout: float | None = None,
        user_agent: str = "uvm",
    ) -> None:
        """Initialize HTTP client.

        Args:
            cacertfile: CA bundle (None: default trust store)
            environ: Environment used for proxy lookup (default: os.environ)
            timeout: Socket timeout in seconds (None: block indefinitely)
            user_agent: User-Agent header value
        """
        self.cacertfile = cacertfile
        self.environ = environ
        self.timeout = timeout
        self.user_agent = user_agent

    def proxy(self, scheme: str) -> ProxySettings | None:
        """Proxy settings to use for ``scheme``, if any."""
        raw = proxy_for_scheme(scheme, self.environ)
        if raw is None:
            return None
        return parse_proxy(raw)

    def _opener(
        self, url: str, scheme: str, proxy: ProxySettings | None
    ) -> Result[urllib.request.OpenerDirector, HttpError]:
        try:
            context = build_ssl_context(self.cacertfile)
        except (OSError, ssl.SSLError) as e:
            return Err(
                HttpError(
                    url=url,
                    status=0,
                    message=f"cannot load CA certificates from {self.cacertfile}: {e}",
                )
            )

        # An explicit (possibly empty) mapping stops urllib reading proxies itself.
        proxies = {scheme: proxy.endpoint} if proxy is not None else {}
        return Ok(
            urllib.request.build_opener(
                urllib.request.ProxyHandler(proxies),
                urllib.request.HTTPSHandler(context=context),
            )
        )

    def get(self, url: str) -> Result[bytes, HttpError]:
        scheme = urlsplit(url).scheme
        proxy = self.proxy(scheme)

        opener_result = self._opener(url, scheme, proxy)
        if isinstance(opener_result, Err):
            return opener_result
        opener = opener_result.value

        req = urllib.request.Request(url, headers={"User-Agent": self.user_agent})
        if proxy is not None and proxy.authorization is not None:
            req.add_header("Proxy-Authorization", proxy.authorization)

        try:
            with opener.open(req, timeout=self.timeout) as response:
                status = response.status
                if status != 200:
                    return Err(HttpError(url=url, status=status, message=response.reason))
                return Ok(response.read())
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
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
        client.set_response("https://example.com/uv.tar.gz", archive_bytes)
        result = client.get("https://example.com/uv.tar.gz")
        assert client.call_count == 1
    """

    def __init__(self) -> None:
        self._responses: dict[str, bytes | HttpError] = {}
        self.calls: list[str] = []

    def set_response(self, url: str, response: bytes | HttpError) -> None:
        """Set the body (or error) returned for ``url``."""
        self._responses[url] = response

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def get(self, url: str) -> Result[bytes, HttpError]:
        self.calls.append(url)

        if url not in self._responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._responses[url]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)
