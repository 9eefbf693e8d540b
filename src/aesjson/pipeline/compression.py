"""Gzip compression stage."""

from __future__ import annotations

import gzip
import zlib
from typing import IO

from aesjson.errors import DecompressionError

DEFAULT_COMPRESSLEVEL = 9


class _GzipReader:
    def __init__(self, source: IO[bytes]) -> None:
        self._gzip = gzip.GzipFile(fileobj=source, mode="rb")

    def read(self, size: int = -1) -> bytes:
        try:
            return self._gzip.read(size)
        except (gzip.BadGzipFile, zlib.error, EOFError) as exc:
            raise DecompressionError(f"Malformed gzip stream: {exc}") from exc

    def close(self) -> None:
        self._gzip.close()


class GzipStage:
    """Gzip filter. Headers carry ``mtime=0`` so equal input gives equal output."""

    def __init__(self, compresslevel: int = DEFAULT_COMPRESSLEVEL) -> None:
        self.compresslevel = compresslevel

    def encode_stream(self, sink: IO[bytes]) -> gzip.GzipFile:
        return gzip.GzipFile(fileobj=sink, mode="wb", compresslevel=self.compresslevel, mtime=0)

    def decode_stream(self, source: IO[bytes]) -> _GzipReader:
        return _GzipReader(source)


__all__ = ["DEFAULT_COMPRESSLEVEL", "GzipStage"]
