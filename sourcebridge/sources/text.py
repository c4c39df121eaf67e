"""Newline-delimited text file source, splittable by byte offsets."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, ClassVar

from sourcebridge.config import PipelineOptions
from sourcebridge.errors import ReaderExhaustedError, SourceValidationError
from sourcebridge.models import ExecutionContext
from sourcebridge.sources.base import BaseReader, BaseSource
from sourcebridge.sources.registry import register_source


@register_source
@dataclass(slots=True, frozen=True)
class TextFileSource(BaseSource):
    """Lines of ``path`` whose first byte falls in ``[start_offset, end_offset)``.

    ``end_offset=None`` means end of file. A line that straddles ``end_offset``
    is read by the range it starts in, so adjacent ranges never overlap.
    Lines must be valid UTF-8; an undecodable line fails the read.
    """

    type_name: ClassVar[str] = "text_file"

    path: str
    start_offset: int = 0
    end_offset: int | None = None

    def validate(self) -> None:
        if not self.path:
            raise SourceValidationError("path is required")
        if self.start_offset < 0:
            raise SourceValidationError(f"start_offset must be >= 0, got {self.start_offset}")
        if self.end_offset is not None and self.end_offset < self.start_offset:
            raise SourceValidationError(
                f"end_offset {self.end_offset} is before start_offset {self.start_offset}"
            )
        if not Path(self.path).is_file():
            raise SourceValidationError(f"not a file: {self.path}")

    def create_reader(
        self,
        options: PipelineOptions,
        execution_context: ExecutionContext | None = None,
    ) -> TextFileReader:
        return TextFileReader(self)

    def split_into_bundles(
        self,
        desired_bundle_size_bytes: int,
        options: PipelineOptions,
    ) -> list[TextFileSource]:
        end = self._resolved_end()
        if end - self.start_offset <= desired_bundle_size_bytes:
            return [self]
        bundles: list[TextFileSource] = []
        for lo in range(self.start_offset, end, desired_bundle_size_bytes):
            hi = min(lo + desired_bundle_size_bytes, end)
            bundles.append(TextFileSource(path=self.path, start_offset=lo, end_offset=hi))
        return bundles

    def get_estimated_size_bytes(self, options: PipelineOptions) -> int:
        return max(0, self._resolved_end() - self.start_offset)

    def _resolved_end(self) -> int:
        size = Path(self.path).stat().st_size
        if self.end_offset is None:
            return size
        return min(self.end_offset, size)


class TextFileReader(BaseReader):
    def __init__(self, source: TextFileSource) -> None:
        self._source = source
        self._end = source.end_offset if source.end_offset is not None else sys.maxsize
        self._fh: BinaryIO | None = None
        self._current: str | None = None

    def start(self) -> bool:
        self._fh = Path(self._source.path).open("rb")
        if self._source.start_offset > 0:
            # Skip the tail of a line that began in the previous range.
            self._fh.seek(self._source.start_offset - 1)
            self._fh.readline()
        return self.advance()

    def advance(self) -> bool:
        if self._fh is None:
            raise RuntimeError("advance() called before start()")
        self._current = None
        if self._fh.tell() >= self._end:
            return False
        raw = self._fh.readline()
        if not raw:
            return False
        self._current = raw.decode("utf-8").rstrip("\r\n")
        return True

    def get_current(self) -> str:
        if self._current is None:
            raise ReaderExhaustedError("No current element")
        return self._current

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
