"""Line classification rules for the .http request-file format.

The format has no explicit tags: whether a line is a request name, a
header, a URL or a message boundary is decided by the predicates below.
They all take a line that has already been stripped of surrounding
whitespace, and none of them has side effects.
"""

SEPARATOR = "###"

PROTOCOL_KEYWORDS = ("WEBSOCKET", "RSOCKET", "GRAPHQL")

METHOD_WORDS = frozenset(
    {"GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS", *PROTOCOL_KEYWORDS}
)

NAME_ANNOTATION = "# @name"
ANNOTATION_PREFIX = "# @"
MESSAGE_BOUNDARY = "==="
WAIT_MARKER = "=== wait-for-server"


def is_separator(line: str) -> bool:
    return line.startswith(SEPARATOR)


def is_protocol_header(line: str) -> bool:
    """True when the leading token is WEBSOCKET, RSOCKET or GRAPHQL (case-sensitive)."""
    tokens = line.split(maxsplit=1)
    return bool(tokens) and tokens[0] in PROTOCOL_KEYWORDS


def is_block_start(line: str) -> bool:
    """A line that opens a new block and therefore ends the current one."""
    return is_separator(line) or is_protocol_header(line)


def is_comment(line: str) -> bool:
    return line.startswith("//") or line.startswith("#")


def is_annotation(line: str) -> bool:
    return line.startswith(ANNOTATION_PREFIX)


def is_name_annotation(line: str) -> bool:
    return line.startswith(NAME_ANNOTATION)


def annotation_name(line: str) -> str:
    """Name carried by a `# @name` line: everything after the 7th character."""
    return line[len(NAME_ANNOTATION):].strip()


def is_method_word(token: str) -> bool:
    return token.upper() in METHOD_WORDS


def looks_like_url(line: str) -> bool:
    return line.startswith(("http://", "https://")) or "://" in line


def separator_name(line: str) -> str | None:
    """Inline request name after `###`, unless it is a bare method keyword."""
    rest = line[len(SEPARATOR):].strip()
    if not rest or is_method_word(rest):
        return None
    return rest


def is_request_name(line: str) -> bool:
    """Heuristic for the free-text name line that may follow a separator.

    A name is anything that cannot be a request line, a comment, a header
    or a URL.
    """
    if not line or line.startswith(("http", "//", "#")):
        return False
    if is_method_word(line.split()[0]):
        return False
    return ":" not in line and not looks_like_url(line)


def is_get_shorthand(line: str) -> bool:
    """A request line made only of an absolute http(s) URL."""
    return line.startswith(("http://", "https://"))


def is_message_boundary(line: str) -> bool:
    return line == MESSAGE_BOUNDARY or is_wait_marker(line)


def is_wait_marker(line: str) -> bool:
    return line.startswith(WAIT_MARKER)


def split_header(line: str) -> tuple[str, str] | None:
    """Split `KEY: VALUE` on the first colon. None when there is no colon."""
    key, sep, value = line.partition(":")
    if not sep:
        return None
    return key.strip(), value.strip()
