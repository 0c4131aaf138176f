import json

import httpx
import pytest

from http_file_runner.config import ClientConfig
from http_file_runner.env import Environment, EnvironmentManager
from http_file_runner.errors import (
    ConnectionFailedError,
    ExecutionError,
    ExecutionTimeout,
    InvalidRequestError,
    InvalidUrlError,
)
from http_file_runner.executor.graphql import GraphQLExecutor
from http_file_runner.executor.http import HttpExecutor
from http_file_runner.parser.base import GraphQLRequest, HttpRequest


def _env() -> EnvironmentManager:
    return EnvironmentManager(
        {"dev": Environment(variables={"host": "https://api.example.com", "token": "abc", "id": "42"})}
    )


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestHttpExecutor:
    def test_resolves_and_sends(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = request.content.decode()
            return httpx.Response(201, json={"ok": True})

        executor = HttpExecutor(ClientConfig(), _env(), client=_client(handler))
        response = executor.execute(
            HttpRequest(
                method="POST",
                uri="{{host}}/users",
                headers={"Authorization": "Bearer {{token}}", "Content-Type": "application/json"},
                body='{"id": "{{id}}"}',
            ),
            "dev",
        )

        assert seen == {
            "method": "POST",
            "url": "https://api.example.com/users",
            "auth": "Bearer abc",
            "body": '{"id": "42"}',
        }
        assert response.status_code == 201
        assert response.reason == "Created"
        assert json.loads(response.body) == {"ok": True}
        assert response.content_type == "application/json"

    def test_no_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.content == b""
            return httpx.Response(200, text="pong")

        executor = HttpExecutor(ClientConfig(), EnvironmentManager(), client=_client(handler))
        response = executor.execute(HttpRequest(uri="https://h/ping"))
        assert response.body == "pong"

    def test_unresolved_url_is_invalid(self):
        executor = HttpExecutor(ClientConfig(), EnvironmentManager(), client=_client(lambda r: httpx.Response(200)))
        with pytest.raises(InvalidUrlError):
            executor.execute(HttpRequest(uri="{{host}}/users"))

    def test_non_http_scheme_is_invalid(self):
        executor = HttpExecutor(ClientConfig(), EnvironmentManager(), client=_client(lambda r: httpx.Response(200)))
        with pytest.raises(InvalidUrlError):
            executor.execute(HttpRequest(uri="ws://h/socket"))

    def test_invalid_method(self):
        executor = HttpExecutor(ClientConfig(), EnvironmentManager(), client=_client(lambda r: httpx.Response(200)))
        with pytest.raises(InvalidRequestError):
            executor.execute(HttpRequest(method="HOST:", uri="https://h/x"))

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        executor = HttpExecutor(ClientConfig(), EnvironmentManager(), client=_client(handler))
        with pytest.raises(ExecutionTimeout):
            executor.execute(HttpRequest(uri="https://h/slow"))

    def test_connect_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        executor = HttpExecutor(ClientConfig(), EnvironmentManager(), client=_client(handler))
        with pytest.raises(ConnectionFailedError):
            executor.execute(HttpRequest(uri="https://h/down"))


class TestGraphQLExecutor:
    def test_posts_query_and_variables(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["content_type"] = request.headers["Content-Type"]
            seen["payload"] = json.loads(request.content)
            return httpx.Response(200, json={"data": {"user": {"name": "John"}}})

        executor = GraphQLExecutor(ClientConfig(), _env(), client=_client(handler))
        response = executor.execute(
            GraphQLRequest(
                uri="{{host}}/graphql",
                query="query ($id: ID!) { user(id: $id) { name } }",
                variables={"id": "{{id}}"},
            ),
            "dev",
        )

        assert seen["method"] == "POST"
        assert seen["content_type"] == "application/json"
        assert seen["payload"] == {
            "query": "query ($id: ID!) { user(id: $id) { name } }",
            "variables": {"id": "42"},
        }
        assert response.status_code == 200

    def test_keeps_explicit_content_type(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["content-type"] == "application/graphql+json"
            assert "variables" not in json.loads(request.content)
            return httpx.Response(200, json={})

        executor = GraphQLExecutor(ClientConfig(), EnvironmentManager(), client=_client(handler))
        executor.execute(
            GraphQLRequest(uri="https://h/graphql", query="{ a }", headers={"content-type": "application/graphql+json"})
        )

    def test_error_status(self):
        executor = GraphQLExecutor(
            ClientConfig(), EnvironmentManager(), client=_client(lambda r: httpx.Response(400, text="bad query"))
        )
        with pytest.raises(ExecutionError, match="400"):
            executor.execute(GraphQLRequest(uri="https://h/graphql", query="{ a"))
