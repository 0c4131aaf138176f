"""Request descriptor models produced by the request-file parser.

Every block of a .http file is turned into one of these immutable
descriptors. Template placeholders ({{VAR}}) are kept as written;
substitution happens later, when an executor runs the request.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """One outgoing frame of a WebSocket or RSocket exchange."""

    model_config = ConfigDict(frozen=True)

    content: str
    wait_for_server: int = Field(default=0, ge=0)  # inbound frames to consume first


class HttpRequest(BaseModel):
    """A plain HTTP request block."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    method: str = "GET"
    uri: str
    http_version: str | None = None
    headers: dict[str, str] = {}
    body: str | None = None
    comments: list[str] = []


class WebSocketRequest(BaseModel):
    """A WEBSOCKET block: connect, then send the messages in order."""

    model_config = ConfigDict(frozen=True)

    uri: str
    headers: dict[str, str] = {}
    messages: list[Message] = []


class RSocketRequest(BaseModel):
    """An RSOCKET block. Same shape as WebSocketRequest, different executor."""

    model_config = ConfigDict(frozen=True)

    uri: str
    headers: dict[str, str] = {}
    messages: list[Message] = []


class GraphQLRequest(BaseModel):
    """A GRAPHQL block: a query plus optional JSON variables."""

    model_config = ConfigDict(frozen=True)

    uri: str
    query: str = ""
    variables: Any | None = None
    headers: dict[str, str] = {}


Request = HttpRequest | WebSocketRequest | GraphQLRequest | RSocketRequest


def header_value(headers: dict[str, str], name: str) -> str | None:
    """Case-insensitive header lookup. The last matching key wins."""
    found = None
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            found = value
    return found
