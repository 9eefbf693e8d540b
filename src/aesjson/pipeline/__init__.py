"""Public pipeline API re-exported for external users.

The objects listed in ``__all__`` are the supported surface for plugging in
custom stages. Everything else in :mod:`aesjson.pipeline` is internal.
"""
from __future__ import annotations

from aesjson.pipeline.api import (
    read_file,
    read_file_async,
    read_file_with_cipher,
    read_file_with_cipher_async,
    write_file,
    write_file_async,
    write_file_with_cipher,
    write_file_with_cipher_async,
)
from aesjson.pipeline.compression import DEFAULT_COMPRESSLEVEL, GzipStage
from aesjson.pipeline.core import Pipeline
from aesjson.pipeline.encoding import JsonCodec
from aesjson.pipeline.stages import ByteReader, ByteStage, ByteWriter, ValueCodec

__all__ = [
    "ByteReader",
    "ByteStage",
    "ByteWriter",
    "DEFAULT_COMPRESSLEVEL",
    "GzipStage",
    "JsonCodec",
    "Pipeline",
    "ValueCodec",
    "read_file",
    "read_file_async",
    "read_file_with_cipher",
    "read_file_with_cipher_async",
    "write_file",
    "write_file_async",
    "write_file_with_cipher",
    "write_file_with_cipher_async",
]
