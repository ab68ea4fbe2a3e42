"""Incremental frame decoder for the newline-delimited event stream.

Turns raw byte chunks into complete ``data:`` records, holding back any
partial line and any multi-byte character split across chunk boundaries.
"""

import codecs

DATA_PREFIX = "data: "


class FrameDecoder:
    """Reassembles records from a chunked byte stream.

    Feeding a stream in any partition of chunks produces the same records
    as feeding it in one piece.
    """

    def __init__(self, prefix: str = DATA_PREFIX, encoding: str = "utf-8") -> None:
        self._prefix = prefix
        self._decoder = codecs.getincrementaldecoder(encoding)("replace")
        self._buffer = ""

    @property
    def buffer(self) -> str:
        """Decoded text not yet resolved into a complete line."""
        return self._buffer

    def feed(self, chunk: bytes) -> list[str]:
        """Decode a chunk and return the records it completes.

        Args:
            chunk: Next bytes of the stream.

        Returns:
            Payloads of newly completed data lines, prefix removed.
        """
        self._buffer += self._decoder.decode(chunk)
        lines = self._buffer.split("\n")
        self._buffer = lines.pop()
        return [record for line in lines if (record := self._record(line)) is not None]

    def flush(self) -> str | None:
        """Emit the last record from unterminated data at stream end.

        Returns:
            The final record, or None if nothing usable remains.
        """
        remaining = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        self._decoder.reset()
        return self._record(remaining)

    def _record(self, line: str) -> str | None:
        line = line.removesuffix("\r")
        if not line.startswith(self._prefix):
            return None
        return line[len(self._prefix):]
