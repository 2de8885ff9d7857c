"""
Source Reader
=============

Supplies the scanner with the characters of an input stream, one Unicode
codepoint at a time, each tagged with its line (1-based) and column
(0-based).

The reader buffers exactly one physical line. When the buffer runs out it
pulls the next line from the stream; a last line lacking its terminator
gets one appended, so the scanner always sees a newline before the end of
input. Once the stream is exhausted the buffer holds only END_OF_INPUT,
which is then returned on every call: ``next()`` never raises and never
runs dry.

Iteration is over codepoints, not graphemes, so combining diacritics are
returned as separate characters.

Example Usage
-------------
>>> reader = SourceReader.from_string("x := 1")
>>> reader.next()
PositionedChar(char='x', line=1, column=0)
"""

from dataclasses import dataclass
from typing import TextIO
import io
import logging

logger = logging.getLogger(__name__)

# ^D sentinel returned once the input is exhausted
END_OF_INPUT = "\x04"

NEWLINE = "\n"


@dataclass(frozen=True)
class PositionedChar:
    """
    One codepoint of input with its source position.

    Attributes:
        char: The character (END_OF_INPUT at end of stream)
        line: Line number (1-indexed)
        column: Column number (0-indexed)
    """
    char: str
    line: int
    column: int

    @property
    def at_end(self) -> bool:
        """True if this is the end-of-input sentinel."""
        return self.char == END_OF_INPUT


class SourceReader:
    """
    Line-buffered codepoint reader over a text stream.

    The line counter starts at zero and is incremented by every refill,
    including the final one that installs the sentinel, so the sentinel
    sits one line past the last physical line.

    Attributes:
        line: Number of the line currently buffered (0 before the first read)
    """

    def __init__(self, stream: TextIO):
        """
        Initialize the reader.

        Args:
            stream: Text stream to read lines from; not closed by the reader
        """
        self._stream = stream
        self._buffer = ""
        self._next_col = 0
        self.line = 0

    @classmethod
    def from_string(cls, source: str) -> "SourceReader":
        """Create a reader over an in-memory string."""
        return cls(io.StringIO(source))

    @property
    def current_line(self) -> str:
        """Text of the buffered line, without its terminator."""
        return self._buffer.rstrip("\r" + NEWLINE + END_OF_INPUT)

    def next(self) -> PositionedChar:
        """
        Return the next character of input.

        Returns:
            The next PositionedChar, or the END_OF_INPUT sentinel (forever)
            once the stream is exhausted
        """
        while True:
            col = self._next_col
            if col < len(self._buffer):
                char = self._buffer[col]
                # the sentinel is never consumed
                if char != END_OF_INPUT:
                    self._next_col += 1
                return PositionedChar(char, self.line, col)

            self._refill()

    def _refill(self) -> None:
        """Replace the exhausted buffer with the next physical line."""
        text = self._stream.readline()
        if not text:
            self._buffer = END_OF_INPUT
            logger.debug(f"end of input after line {self.line}")
        elif not text.endswith(NEWLINE):
            self._buffer = text + NEWLINE
        else:
            self._buffer = text

        self.line += 1
        self._next_col = 0

        if self._buffer != END_OF_INPUT:
            logger.debug(f"line {self.line}: {self.current_line!r}")
