"""Result models returned by the protocol executors."""

from typing import Literal

from pydantic import BaseModel


class HttpResponse(BaseModel):
    """Response of an HTTP or GraphQL request."""

    status_code: int
    reason: str = ""
    http_version: str = "HTTP/1.1"
    headers: dict[str, str] = {}
    body: str = ""
    content_type: str | None = None
    elapsed_ms: int = 0


class Frame(BaseModel):
    """One frame of a WebSocket or RSocket exchange."""

    direction: Literal["sent", "received"]
    content: str


class ExchangeTranscript(BaseModel):
    """Every frame sent and received during a message exchange, in order."""

    uri: str
    frames: list[Frame] = []
    closed_by_server: bool = False

    def sent(self, content: str) -> None:
        self.frames.append(Frame(direction="sent", content=content))

    def received(self, content: str) -> None:
        self.frames.append(Frame(direction="received", content=content))
