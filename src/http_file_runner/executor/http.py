"""HTTP executor: sends an HttpRequest descriptor with httpx."""

import logging
import re
import time

import httpx

from http_file_runner.config import ClientConfig
from http_file_runner.env import DEFAULT_ENV, EnvironmentManager
from http_file_runner.errors import (
    ConnectionFailedError,
    ExecutionError,
    ExecutionTimeout,
    InvalidRequestError,
    InvalidUrlError,
)
from http_file_runner.executor.base import HttpResponse
from http_file_runner.parser.base import HttpRequest

logger = logging.getLogger(__name__)

# RFC 9110 token characters
METHOD_PATTERN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


class HttpExecutor:
    """Executes HTTP requests after resolving their templates."""

    def __init__(
        self,
        config: ClientConfig,
        env_manager: EnvironmentManager,
        client: httpx.Client | None = None,
    ):
        self.config = config
        self.env_manager = env_manager
        self.client = client or config.build_client()

    def execute(self, request: HttpRequest, env_name: str | None = None) -> HttpResponse:
        env_name = env_name or DEFAULT_ENV
        uri = self.env_manager.resolve(env_name, request.uri)
        url = parse_http_url(uri)

        if not METHOD_PATTERN.match(request.method):
            raise InvalidRequestError(f"Invalid HTTP method: {request.method}", uri)
        if request.http_version:
            logger.debug("HTTP version %s requested; version is negotiated", request.http_version)

        headers = self.env_manager.resolve_dict(env_name, request.headers)
        content = None
        if request.body is not None:
            content = self.env_manager.resolve(env_name, request.body).encode("utf-8")

        return send(self.client, request.method, url, headers, content)


def parse_http_url(uri: str) -> httpx.URL:
    """Parse an absolute http(s) URL or raise InvalidUrlError."""
    try:
        url = httpx.URL(uri)
    except httpx.InvalidURL as e:
        raise InvalidUrlError(f"Invalid URL: {e}", uri) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidUrlError("Invalid URL: expected an absolute http(s) URL", uri)
    return url


def send(
    client: httpx.Client,
    method: str,
    url: httpx.URL,
    headers: dict[str, str],
    content: bytes | None,
) -> HttpResponse:
    """Send one request and map httpx failures onto ExecutionError subclasses."""
    logger.info("%s %s", method, url)
    start_time = time.perf_counter()
    try:
        response = client.request(method, url, headers=headers, content=content)
    except httpx.TimeoutException as e:
        raise ExecutionTimeout(f"Request timed out: {e}", str(url)) from e
    except httpx.ConnectError as e:
        raise ConnectionFailedError(f"Failed to connect to server: {e}", str(url)) from e
    except httpx.HTTPError as e:
        raise ExecutionError(f"HTTP error occurred: {e}", str(url)) from e
    elapsed_ms = int((time.perf_counter() - start_time) * 1000)

    return HttpResponse(
        status_code=response.status_code,
        reason=response.reason_phrase or "",
        http_version=response.http_version,
        headers=dict(response.headers),
        body=response.text,
        content_type=response.headers.get("content-type"),
        elapsed_ms=elapsed_ms,
    )
