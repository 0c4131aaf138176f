"""CLI entry point for http-file-runner."""

import json
import logging
from pathlib import Path

import click

from http_file_runner.config import DEFAULT_TIMEOUT, ClientConfig
from http_file_runner.curl import curl_to_http, http_to_curl
from http_file_runner.env import EnvironmentManager
from http_file_runner.errors import HttpFileRunnerError
from http_file_runner.executor.base import ExchangeTranscript, HttpResponse
from http_file_runner.parser.base import GraphQLRequest, HttpRequest, Request, RSocketRequest
from http_file_runner.parser.httpfile import parse_http_file
from http_file_runner.runner import RequestRunner

SEPARATOR_WIDTH = 80


def _echo_request(request: Request) -> None:
    if isinstance(request, HttpRequest):
        if request.name:
            click.echo(f"### {request.name}\n")
        click.echo(f"{request.method} {request.uri}")
        if request.headers:
            click.echo("Headers:")
            for key, value in request.headers.items():
                click.echo(f"  {key}: {value}")
        if request.body is not None:
            click.echo(f"Body:\n{request.body}")
    elif isinstance(request, GraphQLRequest):
        click.echo("### GraphQL Request\n")
        click.echo(f"Query:\n{request.query}")
        if request.variables is not None:
            click.echo(f"Variables:\n{json.dumps(request.variables, indent=2)}")
    elif isinstance(request, RSocketRequest):
        click.echo("### RSocket Request\n")
        click.echo(f"Connecting to RSocket: {request.uri}")
    else:
        click.echo("### WebSocket Request\n")
        click.echo(f"Connecting to WebSocket: {request.uri}")
    click.echo()


def _echo_result(result: HttpResponse | ExchangeTranscript) -> None:
    if isinstance(result, ExchangeTranscript):
        for frame in result.frames:
            label = "Sending" if frame.direction == "sent" else "Received"
            click.echo(f"{label}: {frame.content}")
        if result.closed_by_server:
            click.echo("Connection closed by server")
        return

    click.echo(f"{result.http_version} {result.status_code} {result.reason}".rstrip())
    for key, value in result.headers.items():
        click.echo(f"{key}: {value}")
    click.echo()
    click.echo(_pretty_body(result))


def _pretty_body(response: HttpResponse) -> str:
    if response.content_type and "json" in response.content_type.lower():
        try:
            return json.dumps(json.loads(response.body), indent=2, ensure_ascii=False)
        except json.JSONDecodeError:
            pass
    return response.body


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Run .http request files against HTTP, GraphQL, WebSocket and RSocket endpoints."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--env", "env_name", default=None, help="Environment name to use.")
@click.option("-e", "--env-file", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Path to environment file.")
@click.option("-p", "--private-env-file", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Path to private environment file.")
@click.option("--timeout", default=DEFAULT_TIMEOUT, type=float, show_default=True, help="Timeout in seconds for connects and responses.")
@click.option("--insecure", is_flag=True, help="Do not verify TLS certificates.")
@click.option("--proxy", default=None, help="Proxy URL for HTTP and GraphQL requests.")
def run(
    file_path: Path,
    env_name: str | None,
    env_file: Path | None,
    private_env_file: Path | None,
    timeout: float,
    insecure: bool,
    proxy: str | None,
):
    """Execute the requests of a .http or .rest file in order."""
    try:
        env_manager = EnvironmentManager()
        env_manager.load_env_files(file_path.parent, env_file, private_env_file)
        requests = parse_http_file(file_path)
    except HttpFileRunnerError as e:
        raise click.ClickException(str(e)) from e

    if not requests:
        click.echo("No requests found in file")
        return

    config = ClientConfig(timeout=timeout, verify=not insecure, proxy=proxy)
    with RequestRunner.for_file(config, env_manager, file_path, env_name) as runner:
        for index, request in enumerate(requests):
            if index > 0:
                click.echo(f"\n{'=' * SEPARATOR_WIDTH}\n")
            _echo_request(request)
            try:
                result = runner.execute(request, env_name)
            except HttpFileRunnerError as e:
                raise click.ClickException(str(e)) from e
            _echo_result(result)


@main.command()
@click.argument("curl_command")
def convert(curl_command: str):
    """Convert a curl command to .http request format."""
    try:
        click.echo(curl_to_http(curl_command), nl=False)
    except HttpFileRunnerError as e:
        raise click.ClickException(str(e)) from e


@main.command("to-curl")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def to_curl(file_path: Path):
    """Convert the HTTP requests of a .http file to curl commands."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise click.ClickException(f"Failed to read file {file_path}: {e}") from e
    try:
        click.echo(http_to_curl(text))
    except HttpFileRunnerError as e:
        raise click.ClickException(str(e)) from e
