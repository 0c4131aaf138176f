"""GraphQL executor: POSTs query and variables as JSON over HTTP."""

import json
import logging

import httpx

from http_file_runner.config import ClientConfig
from http_file_runner.env import DEFAULT_ENV, EnvironmentManager
from http_file_runner.errors import ExecutionError, InvalidRequestError
from http_file_runner.executor.base import HttpResponse
from http_file_runner.executor.http import parse_http_url, send
from http_file_runner.parser.base import GraphQLRequest, header_value

logger = logging.getLogger(__name__)


class GraphQLExecutor:
    def __init__(
        self,
        config: ClientConfig,
        env_manager: EnvironmentManager,
        client: httpx.Client | None = None,
    ):
        self.config = config
        self.env_manager = env_manager
        self.client = client or config.build_client()

    def build_payload(self, request: GraphQLRequest, env_name: str) -> dict:
        """Resolve the query and variables into the JSON request body."""
        payload = {"query": self.env_manager.resolve(env_name, request.query)}
        if request.variables is not None:
            # substitute on the serialized form so placeholders inside strings resolve
            resolved = self.env_manager.resolve(env_name, json.dumps(request.variables))
            try:
                payload["variables"] = json.loads(resolved)
            except json.JSONDecodeError as e:
                raise InvalidRequestError(f"Variables are not valid JSON after substitution: {e}") from e
        return payload

    def execute(self, request: GraphQLRequest, env_name: str | None = None) -> HttpResponse:
        env_name = env_name or DEFAULT_ENV
        uri = self.env_manager.resolve(env_name, request.uri)
        url = parse_http_url(uri)

        headers = self.env_manager.resolve_dict(env_name, request.headers)
        if header_value(headers, "Content-Type") is None:
            headers["Content-Type"] = "application/json"

        payload = self.build_payload(request, env_name)
        response = send(self.client, "POST", url, headers, json.dumps(payload).encode("utf-8"))

        if not 200 <= response.status_code < 300:
            raise ExecutionError(
                f"GraphQL request failed with status {response.status_code}: {response.body}",
                uri,
            )
        return response
