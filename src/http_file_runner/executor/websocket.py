"""WebSocket executor: connect, then play the message script.

Before each message, `wait_for_server` inbound frames are consumed, each
within the configured timeout. A message with no wait gets one optional
reply read after it is sent. Once the script is done the connection is
read until the server closes it or stays idle for `idle_timeout`.
"""

import logging

from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidURI
from websockets.sync.client import connect

from http_file_runner.config import ClientConfig
from http_file_runner.env import DEFAULT_ENV, EnvironmentManager
from http_file_runner.errors import ConnectionFailedError, ExecutionTimeout, InvalidUrlError
from http_file_runner.executor.base import ExchangeTranscript
from http_file_runner.parser.base import WebSocketRequest

logger = logging.getLogger(__name__)


class WebSocketExecutor:
    def __init__(self, config: ClientConfig, env_manager: EnvironmentManager):
        self.config = config
        self.env_manager = env_manager

    def execute(self, request: WebSocketRequest, env_name: str | None = None) -> ExchangeTranscript:
        env_name = env_name or DEFAULT_ENV
        uri = self.env_manager.resolve(env_name, request.uri)
        if not uri.startswith(("ws://", "wss://")):
            raise InvalidUrlError("Invalid WebSocket URL: expected ws:// or wss://", uri)
        headers = self.env_manager.resolve_dict(env_name, request.headers)

        transcript = ExchangeTranscript(uri=uri)
        logger.info("Connecting to WebSocket %s", uri)
        try:
            with connect(uri, additional_headers=headers, open_timeout=self.config.timeout) as ws:
                self._play(ws, request, env_name, transcript)
        except InvalidURI as e:
            raise InvalidUrlError(f"Invalid WebSocket URL: {e}", uri) from e
        except TimeoutError as e:
            raise ExecutionTimeout("Timed out opening the WebSocket connection", uri) from e
        except (InvalidHandshake, OSError) as e:
            raise ConnectionFailedError(f"Failed to connect to WebSocket: {e}", uri) from e
        return transcript

    def _play(self, ws, request: WebSocketRequest, env_name: str, transcript: ExchangeTranscript) -> None:
        for message in request.messages:
            for _ in range(message.wait_for_server):
                self._receive(ws, transcript, required=True)
                if transcript.closed_by_server:
                    return

            content = self.env_manager.resolve(env_name, message.content)
            logger.debug("Sending: %s", content)
            try:
                ws.send(content)
            except ConnectionClosed as e:
                raise ConnectionFailedError(f"Connection closed before sending: {e}", transcript.uri) from e
            transcript.sent(content)

            if message.wait_for_server == 0:
                self._receive(ws, transcript, required=False)
                if transcript.closed_by_server:
                    return

        while self._receive(ws, transcript, required=False):
            pass

    def _receive(self, ws, transcript: ExchangeTranscript, required: bool) -> bool:
        """Read one frame into the transcript.

        Returns False when nothing arrived in time or the server closed the
        connection. A required frame that does not arrive raises ExecutionTimeout.
        """
        timeout = self.config.timeout if required else self.config.idle_timeout
        try:
            data = ws.recv(timeout=timeout)
        except TimeoutError as e:
            if required:
                raise ExecutionTimeout(f"No frame from server within {timeout}s", transcript.uri) from e
            return False
        except ConnectionClosed:
            logger.debug("Connection closed by server")
            transcript.closed_by_server = True
            return False

        if isinstance(data, bytes):
            content = f"<binary {len(data)} bytes>"
        else:
            content = data
        logger.debug("Received: %s", content)
        transcript.received(content)
        return True
