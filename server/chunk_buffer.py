"""Fixed-size assembly buffer for one chunked upload."""

from typing import List, Tuple

from server.exceptions import ChunkOutOfBoundsError


class ChunkAssemblyBuffer:
    """
    Zero-filled byte region of a declared size that accepts chunk writes in
    any order. Overlapping writes are allowed; the last one wins.

    Covered ranges are tracked for reporting only. Bytes never covered by a
    chunk stay zero and are committed as such.
    """

    def __init__(self, size: int, filename: str):
        self.filename = filename
        self.size = size
        self._data = bytearray(size)
        self._covered: List[Tuple[int, int]] = []

    @property
    def covered_bytes(self) -> int:
        """Number of distinct buffer bytes written by at least one chunk."""
        return sum(end - start for start, end in self._covered)

    def write_chunk(self, data: bytes, offset: int) -> None:
        """
        Copy a chunk into the buffer.

        Args:
            data: Chunk content
            offset: Position of the first chunk byte in the assembled file

        Raises:
            ChunkOutOfBoundsError: If the chunk does not fit inside the buffer
        """
        end = offset + len(data)
        if offset < 0 or end > self.size:
            raise ChunkOutOfBoundsError(offset, len(data), self.size)

        self._data[offset:end] = data
        self._mark_covered(offset, end)

    def _mark_covered(self, start: int, end: int) -> None:
        # Ranges are half-open, sorted and non-overlapping; touching ranges merge.
        if start == end:
            return

        kept = []
        for covered_start, covered_end in self._covered:
            if covered_end < start or covered_start > end:
                kept.append((covered_start, covered_end))
            else:
                start = min(start, covered_start)
                end = max(end, covered_end)
        kept.append((start, end))
        kept.sort()
        self._covered = kept

    def take(self) -> bytes:
        """
        Hand over the assembled content and release the buffer.

        Returns:
            Assembled bytes
        """
        data = bytes(self._data)
        self._data = bytearray()
        return data
