"""Bounded line buffer for streaming text output."""

from typing import Iterable, List, TextIO

DEFAULT_FLUSH_THRESHOLD = 50_000


class LineBuffer:
    """
    Accumulates output lines and writes them out in chunks.

    Lines are joined with ``"\\n"`` and the stream never receives a trailing
    newline, so the bytes written do not depend on where flushes happen.
    """

    def __init__(self, stream: TextIO, threshold: int = DEFAULT_FLUSH_THRESHOLD):
        if threshold < 1:
            raise ValueError(f"Flush threshold must be at least 1, got {threshold}")
        self._stream = stream
        self.threshold = threshold
        self._lines: List[str] = []
        self.lines_written = 0
        self.flush_count = 0

    def __len__(self) -> int:
        return len(self._lines)

    def append(self, line: str) -> None:
        self._lines.append(line)
        if len(self._lines) > self.threshold:
            self.flush()

    def extend(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.append(line)

    def flush(self) -> None:
        """Write all buffered lines to the stream and clear the buffer."""
        if not self._lines:
            return
        chunk = "\n".join(self._lines)
        if self.lines_written:
            chunk = "\n" + chunk
        self._stream.write(chunk)
        self.lines_written += len(self._lines)
        self.flush_count += 1
        self._lines = []
