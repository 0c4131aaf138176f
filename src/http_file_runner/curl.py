"""Convert between curl commands and .http request text."""

import base64
import re
import shlex

from http_file_runner.errors import ConversionError
from http_file_runner.parser.base import HttpRequest
from http_file_runner.parser.classify import looks_like_url, split_header
from http_file_runner.parser.httpfile import parse_http_text

DATA_FLAGS = ("-d", "--data", "--data-raw", "--data-binary", "--data-ascii")


def curl_to_http(command: str) -> str:
    """Convert a curl command line into a single .http request block."""
    command = re.sub(r"\\\s*\n\s*", " ", command)
    try:
        tokens = shlex.split(command, posix=True)
    except ValueError as e:
        raise ConversionError(f"Cannot tokenize curl command: {e}") from e
    if tokens and tokens[0] == "curl":
        tokens = tokens[1:]
    if not tokens:
        raise ConversionError("curl command contains no arguments")

    method = None
    url = None
    headers: dict[str, str] = {}
    data_parts: list[str] = []
    positionals: list[str] = []

    i = 0
    while i < len(tokens):
        token = tokens[i]
        takes_value = token in ("-X", "--request", "-H", "--header", "--url", "-u", "--user", "--json", *DATA_FLAGS)
        if takes_value and i + 1 >= len(tokens):
            raise ConversionError(f"curl: missing argument for {token}")

        if token in ("-X", "--request"):
            i += 1
            method = tokens[i].upper()
        elif token in ("-H", "--header"):
            i += 1
            pair = split_header(tokens[i])
            if pair is not None:
                headers[pair[0]] = pair[1]
        elif token in DATA_FLAGS:
            i += 1
            data_parts.append(tokens[i])
        elif token == "--json":
            i += 1
            data_parts.append(tokens[i])
            headers.setdefault("Content-Type", "application/json")
            headers.setdefault("Accept", "application/json")
        elif token in ("-u", "--user"):
            i += 1
            credentials = base64.b64encode(tokens[i].encode("utf-8")).decode("ascii")
            headers["Authorization"] = f"Basic {credentials}"
        elif token == "--url":
            i += 1
            url = tokens[i]
        elif not token.startswith("-"):
            positionals.append(token)
        i += 1

    if url is None:
        urls = [p for p in positionals if looks_like_url(p)]
        url = urls[0] if urls else (positionals[0] if positionals else None)
    if not url:
        raise ConversionError("No URL found in curl command")

    body = "&".join(data_parts) if data_parts else None
    if method is None:
        method = "POST" if body is not None else "GET"

    lines = ["# Converted from cURL", "###", f"{method} {url}"]
    lines.extend(f"{key}: {value}" for key, value in headers.items())
    if body is not None:
        lines.append("")
        lines.append(body)
    return "\n".join(lines) + "\n"


def http_to_curl(text: str) -> str:
    """Render every HTTP request in the text as a curl command."""
    requests = [r for r in parse_http_text(text) if isinstance(r, HttpRequest)]
    if not requests:
        raise ConversionError("No HTTP request found")
    return "\n\n".join(request_to_curl(r) for r in requests)


def request_to_curl(request: HttpRequest) -> str:
    parts = ["curl"]
    if request.method != "GET":
        parts.extend(["-X", request.method])
    parts.append(shlex.quote(request.uri))
    for key, value in request.headers.items():
        parts.extend(["-H", shlex.quote(f"{key}: {value}")])
    if request.body is not None:
        parts.extend(["-d", shlex.quote(request.body)])
    return " ".join(parts)
