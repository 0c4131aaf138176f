"""Parser for .http / .rest request files.

A single forward pass over the file. Each recognized block becomes one
request descriptor; blocks that end up without a URI are dropped and the
scan continues, so an imperfect file still yields every runnable request.

Block shapes:

    ### optional name
    optional name line
    # @name name / # comment / // comment
    METHOD URI [HTTP-VERSION]        (or just an http(s) URL)
    Header: value

    body until the next ### or protocol keyword

    WEBSOCKET|RSOCKET URI            GRAPHQL URI
    Header: value                    Header: value

    message                          query
    === / === wait-for-server        { "json": "variables" }
    message
"""

import json
import logging
from pathlib import Path

from http_file_runner.errors import RequestFileError
from http_file_runner.parser.base import (
    GraphQLRequest,
    HttpRequest,
    Message,
    Request,
    RSocketRequest,
    WebSocketRequest,
)
from http_file_runner.parser.buffer import LineBuffer
from http_file_runner.parser.classify import (
    annotation_name,
    is_annotation,
    is_block_start,
    is_comment,
    is_get_shorthand,
    is_message_boundary,
    is_name_annotation,
    is_protocol_header,
    is_request_name,
    is_separator,
    is_wait_marker,
    separator_name,
    split_header,
)

logger = logging.getLogger(__name__)


class HttpFileParser:
    """Turns request-file text into an ordered list of request descriptors.

    The parser owns its line buffer; create a new parser for each text.
    """

    def __init__(self, text: str):
        self.buffer = LineBuffer(text)

    def parse(self) -> list[Request]:
        requests: list[Request] = []
        while not self.buffer.at_end():
            line = self._current()
            if not line:
                self.buffer.advance()
                continue

            if is_separator(line):
                self.buffer.advance()
                request = self._parse_http_block(separator_name(line))
            elif is_protocol_header(line):
                request = self._parse_protocol_block()
            else:
                # stray text outside any block
                self.buffer.advance()
                continue

            if request is not None:
                requests.append(request)
        return requests

    def _current(self) -> str | None:
        raw = self.buffer.peek()
        return None if raw is None else raw.strip()

    def _parse_http_block(self, name: str | None) -> Request | None:
        start = self.buffer.position
        comments: list[str] = []

        line = self._current()
        if line is not None and is_request_name(line):
            name = line
            self.buffer.advance()

        name = self._parse_annotations(name, comments)

        line = self._current()
        if line is None:
            logger.debug("Dropping request block at line %d: no request line", start)
            return None
        if is_protocol_header(line):
            # the separator was only a title for a protocol block
            return self._parse_protocol_block()

        method, uri, http_version = _split_request_line(line)
        self.buffer.advance()

        headers, has_body = self._parse_headers(comments)
        body = self._parse_body() if has_body else None

        if not uri:
            logger.debug("Dropping request block at line %d: empty URI", start)
            return None

        return HttpRequest(
            name=name,
            method=method,
            uri=uri,
            http_version=http_version,
            headers=headers,
            body=body,
            comments=comments,
        )

    def _parse_annotations(self, name: str | None, comments: list[str]) -> str | None:
        while True:
            line = self._current()
            if line is None or not is_comment(line):
                return name
            if is_name_annotation(line):
                name = annotation_name(line)
            elif not is_annotation(line):
                comments.append(line)
            self.buffer.advance()

    def _parse_headers(self, comments: list[str] | None) -> tuple[dict[str, str], bool]:
        """Read header lines up to the first blank line.

        Returns the headers and whether a blank line (consumed) ended them.
        Comments are collected only when a list is given.
        """
        headers: dict[str, str] = {}
        while not self.buffer.at_end():
            line = self._current()
            if not line:
                self.buffer.advance()
                return headers, True

            if is_comment(line):
                if comments is not None and not is_annotation(line):
                    comments.append(line)
            else:
                pair = split_header(line)
                if pair is not None:
                    key, value = pair
                    headers[key] = value
            self.buffer.advance()
        return headers, False

    def _parse_body(self) -> str | None:
        lines = []
        while not self.buffer.at_end():
            raw = self.buffer.peek()
            if is_block_start(raw.strip()):
                break
            lines.append(raw)
            self.buffer.advance()
        return _join_lines(lines)

    def _parse_protocol_block(self) -> Request | None:
        start = self.buffer.position
        tokens = self._current().split()
        self.buffer.advance()
        if len(tokens) < 2:
            logger.debug("Skipping %s block at line %d: no URI", tokens[0], start)
            return None

        keyword, uri = tokens[0], tokens[1]
        headers, _ = self._parse_headers(None)

        if keyword == "GRAPHQL":
            query, variables = self._parse_graphql()
            return GraphQLRequest(uri=uri, query=query, variables=variables, headers=headers)

        messages = self._parse_messages()
        if keyword == "RSOCKET":
            return RSocketRequest(uri=uri, headers=headers, messages=messages)
        return WebSocketRequest(uri=uri, headers=headers, messages=messages)

    def _parse_messages(self) -> list[Message]:
        """Shared by WEBSOCKET and RSOCKET blocks."""
        messages: list[Message] = []
        pending: list[str] = []
        wait_for_server = 0

        while not self.buffer.at_end():
            raw = self.buffer.peek()
            line = raw.strip()
            if is_block_start(line):
                break

            if is_message_boundary(line):
                content = _join_lines(pending)
                pending = []
                if content is not None:
                    messages.append(Message(content=content, wait_for_server=wait_for_server))
                wait_for_server = wait_for_server + 1 if is_wait_marker(line) else 0
            elif not is_comment(line):
                pending.append(raw)
            self.buffer.advance()

        content = _join_lines(pending)
        if content is not None:
            messages.append(Message(content=content, wait_for_server=wait_for_server))
        return messages

    def _parse_graphql(self) -> tuple[str, object]:
        query_lines: list[str] = []
        variables = None

        while not self.buffer.at_end():
            raw = self.buffer.peek()
            line = raw.strip()
            if is_block_start(line):
                break
            if is_comment(line):
                self.buffer.advance()
                continue

            # Known ambiguity: a query line starting with "{" after other
            # query content is taken as the start of the variables object.
            if line.startswith("{") and query_lines:
                parsed = self._parse_variables()
                if parsed is not None:
                    variables = parsed
                continue

            query_lines.append(raw)
            self.buffer.advance()

        return _join_lines(query_lines) or "", variables

    def _parse_variables(self) -> object:
        """Collect a JSON object up to the first line ending in "}"."""
        start = self.buffer.position
        lines = []
        while not self.buffer.at_end():
            raw = self.buffer.peek()
            if is_block_start(raw.strip()):
                break
            lines.append(raw)
            self.buffer.advance()
            if raw.strip().endswith("}"):
                break

        try:
            return json.loads("\n".join(lines))
        except json.JSONDecodeError as e:
            logger.debug("Discarding GraphQL variables at line %d: %s", start, e)
            return None


def _split_request_line(line: str) -> tuple[str, str, str | None]:
    """Return (method, uri, http_version) for a request line."""
    if is_get_shorthand(line):
        return "GET", line, None

    tokens = line.split()
    if not tokens:
        return "GET", "", None
    method = tokens[0].upper()
    uri = tokens[1] if len(tokens) > 1 else ""
    http_version = " ".join(tokens[2:]) or None
    return method, uri, http_version


def _join_lines(lines: list[str]) -> str | None:
    """Join raw lines verbatim. None when nothing was accumulated."""
    if not lines:
        return None
    return "\n".join(lines)


def parse_http_text(text: str) -> list[Request]:
    """Parse request-file text into descriptors, in file order."""
    return HttpFileParser(text).parse()


def parse_http_file(file_path: Path) -> list[Request]:
    """Read a .http file as UTF-8 and parse it."""
    file_path = Path(file_path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise RequestFileError(file_path, str(e)) from e
    return parse_http_text(text)
