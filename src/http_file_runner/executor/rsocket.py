"""RSocket executor over the WebSocket transport.

Each message is sent as a request/response interaction. Every
`wait_for_server` count before a message is spent on one empty
request/response cycle, so the peer can deliver pending responses.
"""

import asyncio
import logging

import aiohttp
from rsocket.helpers import single_transport_provider
from rsocket.payload import Payload
from rsocket.rsocket_client import RSocketClient
from rsocket.transports.aiohttp_websocket import TransportAioHttpClient

from http_file_runner.config import ClientConfig
from http_file_runner.env import DEFAULT_ENV, EnvironmentManager
from http_file_runner.errors import (
    ConnectionFailedError,
    ExecutionError,
    ExecutionTimeout,
    InvalidUrlError,
)
from http_file_runner.executor.base import ExchangeTranscript
from http_file_runner.parser.base import RSocketRequest

logger = logging.getLogger(__name__)


def uri_to_transport_addr(uri: str) -> str:
    """Normalize an RSocket URI to a WebSocket address.

    ws:// and wss:// are kept, rs:// and tcp:// become ws://, a bare
    host:port gets ws:// prepended. Other schemes are rejected.
    """
    uri = uri.strip()
    if uri.startswith(("ws://", "wss://")):
        return uri
    for scheme in ("rs://", "tcp://"):
        if uri.startswith(scheme):
            return "ws://" + uri[len(scheme):]
    if "://" in uri:
        raise InvalidUrlError("RSocket expects ws://, wss://, rs://, or tcp:// scheme", uri)
    return "ws://" + uri


class RSocketExecutor:
    def __init__(self, config: ClientConfig, env_manager: EnvironmentManager):
        self.config = config
        self.env_manager = env_manager

    def execute(self, request: RSocketRequest, env_name: str | None = None) -> ExchangeTranscript:
        env_name = env_name or DEFAULT_ENV
        uri = self.env_manager.resolve(env_name, request.uri)
        addr = uri_to_transport_addr(uri)
        if request.headers:
            logger.debug("RSocket requests carry no HTTP headers; ignoring %s", list(request.headers))

        script = [
            (message.wait_for_server, self.env_manager.resolve(env_name, message.content))
            for message in request.messages
        ]
        transcript = ExchangeTranscript(uri=uri)
        logger.info("Connecting to RSocket %s (%s)", uri, addr)
        try:
            asyncio.run(self._play(addr, script, transcript))
        except asyncio.TimeoutError as e:
            raise ExecutionTimeout(f"No RSocket response within {self.config.timeout}s", uri) from e
        except (aiohttp.ClientError, OSError) as e:
            raise ConnectionFailedError(f"Failed to connect to RSocket: {e}", uri) from e
        except Exception as e:
            raise ExecutionError(f"RSocket request_response failed: {e}", uri) from e
        return transcript

    async def _play(self, addr: str, script: list[tuple[int, str]], transcript: ExchangeTranscript) -> None:
        transport = TransportAioHttpClient(url=addr)
        async with RSocketClient(single_transport_provider(transport)) as client:
            for wait_for_server, content in script:
                for _ in range(wait_for_server):
                    await self._request_response(client, b"", transcript)
                logger.debug("Sending: %s", content)
                transcript.sent(content)
                await self._request_response(client, content.encode("utf-8"), transcript)

    async def _request_response(self, client, data: bytes, transcript: ExchangeTranscript) -> None:
        response = await asyncio.wait_for(client.request_response(Payload(data)), self.config.timeout)
        if response is None or not response.data:
            transcript.received("")
            return
        transcript.received(response.data.decode("utf-8", errors="replace"))
