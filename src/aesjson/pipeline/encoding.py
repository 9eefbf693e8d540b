"""UTF-8 JSON encoding stage."""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, get_args

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from aesjson.errors import SerializationError

_NULL_PAYLOADS = (b"", b"null")


@lru_cache(maxsize=64)
def _cached_adapter(model: Any) -> TypeAdapter[Any]:
    return TypeAdapter(model)


def _adapter(model: Any) -> TypeAdapter[Any]:
    try:
        return _cached_adapter(model)
    except TypeError:
        # Unhashable targets such as Annotated[..., []] skip the cache.
        return TypeAdapter(model)


def _type_name(model: Any) -> str:
    if model is None:
        return "JSON value"
    if get_args(model):
        return repr(model)
    return getattr(model, "__qualname__", None) or repr(model)


class JsonCodec:
    """Converts values to UTF-8 JSON and back.

    Values may be JSON primitives, containers, dataclasses or pydantic
    models. Floats are written with ``repr`` precision, so they read back
    bit-exact. NaN and infinities have no JSON form and are rejected.
    """

    def __init__(self, *, ensure_ascii: bool = False) -> None:
        self.ensure_ascii = ensure_ascii

    def encode(self, value: Any) -> bytes:
        try:
            plain = to_jsonable_python(value)
            text = json.dumps(plain, ensure_ascii=self.ensure_ascii, separators=(",", ":"), allow_nan=False)
        except (PydanticSerializationError, ValueError) as exc:
            raise SerializationError(f"Unable to encode {type(value).__qualname__} as JSON: {exc}") from exc
        return text.encode("utf-8")

    def decode(self, data: bytes, model: Any = None) -> Any:
        """Return the decoded value, or ``None`` for an empty or ``null`` body."""
        if data.strip() in _NULL_PAYLOADS:
            return None

        try:
            parsed = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SerializationError(f"Payload is not valid JSON for {_type_name(model)}: {exc}") from exc

        if model is None:
            return parsed
        try:
            return _adapter(model).validate_python(parsed)
        except ValidationError as exc:
            raise SerializationError(f"Payload does not match {_type_name(model)}: {exc}") from exc


__all__ = ["JsonCodec"]
