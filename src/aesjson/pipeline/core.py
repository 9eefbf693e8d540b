"""Stage chain composition for reading and writing encrypted JSON files."""

from __future__ import annotations

import asyncio
import io
import logging
import os
from contextlib import ExitStack
from pathlib import Path
from typing import IO, Any

from aesjson.pipeline.compression import GzipStage
from aesjson.pipeline.encoding import JsonCodec
from aesjson.pipeline.stages import ByteReader, ByteStage, ByteWriter, ValueCodec

logger = logging.getLogger(__name__)

PathLike = os.PathLike[str] | str


def _push_writer(stack: ExitStack, writer: ByteWriter) -> ByteWriter:
    stack.callback(writer.close)
    return writer


def _push_reader(stack: ExitStack, reader: ByteReader) -> ByteReader:
    stack.callback(reader.close)
    return reader


class Pipeline:
    """Encode → compress → encrypt on write, and the reverse on read.

    ``cipher`` is passed per call so every operation owns its key material.
    Each acquired stream is registered on an :class:`ExitStack`, so the chain
    is closed innermost-first whether the operation succeeds or fails.
    """

    def __init__(self, codec: ValueCodec | None = None, compression: ByteStage | None = None) -> None:
        self.codec: ValueCodec = codec or JsonCodec()
        self.compression: ByteStage = compression or GzipStage()

    def _write_payload(self, stack: ExitStack, payload: bytes, sink: IO[bytes], cipher: ByteStage) -> None:
        encrypted = _push_writer(stack, cipher.encode_stream(sink))
        compressed = _push_writer(stack, self.compression.encode_stream(encrypted))  # type: ignore[arg-type]
        compressed.write(payload)

    def _read_payload(self, stack: ExitStack, source: IO[bytes], cipher: ByteStage) -> bytes:
        decrypted = _push_reader(stack, cipher.decode_stream(source))
        decompressed = _push_reader(stack, self.compression.decode_stream(decrypted))  # type: ignore[arg-type]
        return decompressed.read()

    def write(self, value: Any, sink: IO[bytes], cipher: ByteStage) -> None:
        """Write ``value`` to an open binary ``sink``. The sink is left open."""
        payload = self.codec.encode(value)
        with ExitStack() as stack:
            self._write_payload(stack, payload, sink, cipher)

    def read(self, source: IO[bytes], cipher: ByteStage, model: Any = None) -> Any:
        """Read a value from an open binary ``source``; ``None`` when the payload is empty."""
        with ExitStack() as stack:
            payload = self._read_payload(stack, source, cipher)
        return self.codec.decode(payload, model)

    def write_file(self, value: Any, path: PathLike, cipher: ByteStage) -> None:
        target = Path(path)
        payload = self.codec.encode(value)
        logger.debug("Writing %d byte payload to %s", len(payload), target)
        with ExitStack() as stack:
            raw = stack.enter_context(target.open("wb"))
            self._write_payload(stack, payload, raw, cipher)
        logger.debug("Finished writing %s", target)

    def read_file(self, path: PathLike, cipher: ByteStage, model: Any = None) -> Any:
        source = Path(path)
        logger.debug("Reading %s", source)
        with ExitStack() as stack:
            raw = stack.enter_context(source.open("rb"))
            payload = self._read_payload(stack, raw, cipher)
        logger.debug("Read %d byte payload from %s", len(payload), source)
        return self.codec.decode(payload, model)

    async def write_file_async(self, value: Any, path: PathLike, cipher: ByteStage) -> None:
        """Like :meth:`write_file`; yields only while the file is written."""
        target = Path(path)
        buffer = io.BytesIO()
        self.write(value, buffer, cipher)
        ciphertext = buffer.getvalue()
        logger.debug("Writing %d encrypted bytes to %s", len(ciphertext), target)
        await asyncio.to_thread(target.write_bytes, ciphertext)

    async def read_file_async(self, path: PathLike, cipher: ByteStage, model: Any = None) -> Any:
        """Like :meth:`read_file`; yields only while the file is read."""
        source = Path(path)
        logger.debug("Reading %s", source)
        ciphertext = await asyncio.to_thread(source.read_bytes)
        return self.read(io.BytesIO(ciphertext), cipher, model)


__all__ = ["PathLike", "Pipeline"]
