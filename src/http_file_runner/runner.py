"""Sequential orchestrator: runs parsed requests one at a time in file order."""

import logging
from collections.abc import Iterator
from pathlib import Path

from http_file_runner.config import ClientConfig
from http_file_runner.env import DEFAULT_ENV, EnvironmentManager
from http_file_runner.executor.base import ExchangeTranscript, HttpResponse
from http_file_runner.executor.graphql import GraphQLExecutor
from http_file_runner.executor.http import HttpExecutor
from http_file_runner.executor.rsocket import RSocketExecutor
from http_file_runner.executor.websocket import WebSocketExecutor
from http_file_runner.parser.base import (
    GraphQLRequest,
    HttpRequest,
    Request,
    RSocketRequest,
    WebSocketRequest,
)

logger = logging.getLogger(__name__)

Result = HttpResponse | ExchangeTranscript


class RequestRunner:
    """Dispatches each descriptor to the executor for its type.

    Executions never overlap; the next request starts only after the
    previous one returned.
    """

    def __init__(self, config: ClientConfig, env_manager: EnvironmentManager):
        self.config = config
        self.env_manager = env_manager
        self.client = config.build_client()
        self.executors = {
            HttpRequest: HttpExecutor(config, env_manager, client=self.client),
            GraphQLRequest: GraphQLExecutor(config, env_manager, client=self.client),
            WebSocketRequest: WebSocketExecutor(config, env_manager),
            RSocketRequest: RSocketExecutor(config, env_manager),
        }

    @classmethod
    def for_file(
        cls,
        config: ClientConfig,
        env_manager: EnvironmentManager,
        file_path: Path,
        env_name: str | None = None,
    ) -> "RequestRunner":
        """Build a runner, applying the environment's SSL settings if it has any."""
        ssl_config = env_manager.get_ssl_config(env_name or DEFAULT_ENV)
        if ssl_config is not None:
            config = config.with_ssl_config(ssl_config, Path(file_path).parent)
        return cls(config, env_manager)

    def close(self) -> None:
        """Release the pooled HTTP connections."""
        self.client.close()

    def __enter__(self) -> "RequestRunner":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def execute(self, request: Request, env_name: str | None = None) -> Result:
        executor = self.executors[type(request)]
        return executor.execute(request, env_name)

    def run(self, requests: list[Request], env_name: str | None = None) -> Iterator[tuple[Request, Result]]:
        """Execute requests in order, yielding each with its result."""
        for index, request in enumerate(requests):
            logger.debug("Running request %d of %d", index + 1, len(requests))
            yield request, self.execute(request, env_name)
