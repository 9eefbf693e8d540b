"""Capability interfaces for the pipeline stages."""

from __future__ import annotations

from typing import IO, Any, Protocol, runtime_checkable


class ByteWriter(Protocol):
    def write(self, data: bytes) -> int: ...

    def flush(self) -> None: ...

    def close(self) -> None: ...


class ByteReader(Protocol):
    def read(self, size: int = -1) -> bytes: ...

    def close(self) -> None: ...


@runtime_checkable
class ByteStage(Protocol):
    """Wraps a byte sink for writing and a byte source for reading.

    Closing the returned wrapper must flush whatever the stage still holds
    into the wrapped sink but must not close the sink itself.
    """

    def encode_stream(self, sink: IO[bytes]) -> ByteWriter: ...

    def decode_stream(self, source: IO[bytes]) -> ByteReader: ...


@runtime_checkable
class ValueCodec(Protocol):
    def encode(self, value: Any) -> bytes: ...

    def decode(self, data: bytes, model: Any = None) -> Any: ...


__all__ = ["ByteReader", "ByteStage", "ByteWriter", "ValueCodec"]
