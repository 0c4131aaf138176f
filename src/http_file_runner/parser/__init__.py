"""Request-file parsing: line buffer, classifier, parser and descriptor models."""

from http_file_runner.parser.base import (
    GraphQLRequest,
    HttpRequest,
    Message,
    Request,
    RSocketRequest,
    WebSocketRequest,
    header_value,
)
from http_file_runner.parser.httpfile import HttpFileParser, parse_http_file, parse_http_text

__all__ = [
    "GraphQLRequest",
    "HttpFileParser",
    "HttpRequest",
    "Message",
    "Request",
    "RSocketRequest",
    "WebSocketRequest",
    "header_value",
    "parse_http_file",
    "parse_http_text",
]
