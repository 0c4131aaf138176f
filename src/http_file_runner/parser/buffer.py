"""Line buffer with a forward-only read cursor."""


def split_lines(text: str) -> list[str]:
    """Split on "\\n" only, dropping a trailing "\\r" and the empty tail after a final newline.

    Other Unicode line separators (U+2028, form feed, ...) stay inside the line.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


class LineBuffer:
    """The file text as a list of lines plus a monotonically increasing cursor.

    Lines keep their original whitespace; line terminators are dropped.
    """

    def __init__(self, text: str):
        self.lines = split_lines(text)
        self.position = 0

    def peek(self) -> str | None:
        """Return the line under the cursor, or None at end of input."""
        if self.at_end():
            return None
        return self.lines[self.position]

    def advance(self) -> None:
        if not self.at_end():
            self.position += 1

    def at_end(self) -> bool:
        return self.position >= len(self.lines)
