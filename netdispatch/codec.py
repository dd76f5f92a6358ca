"""JSON codec used by request resolution and response decoding.

Bodies are encoded with ``pydantic_core.to_json`` so plain JSON values,
pydantic models, and dataclasses all serialize the same way. Responses are
validated into their expected shape through a cached ``TypeAdapter``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter
from pydantic_core import from_json, to_json, to_jsonable_python

T = TypeVar("T")

RAW_SHAPE = bytes


def encode_json(value: Any) -> bytes:
    """Serialize one body value into compact JSON bytes.

    Raises ``pydantic_core.PydanticSerializationError`` for values that have
    no JSON representation and ``ValueError`` for NaN or infinite floats.
    """
    content = to_json(value)
    try:
        from_json(content, allow_inf_nan=False)
    except ValueError as exc:
        raise ValueError("Out of range float values are not JSON compliant") from exc
    return content


def decode_json(content: bytes, shape: type[T]) -> T:
    """Parse JSON ``content`` and validate it into ``shape``.

    ``bytes`` is the raw shape: content is returned unchanged without any
    parse attempt. Raises ``pydantic.ValidationError`` on malformed JSON or a
    shape mismatch.
    """
    if shape is RAW_SHAPE:
        return content  # type: ignore[return-value]
    return _adapter(shape).validate_json(content)


def to_json_mapping(value: Any) -> dict[str, Any]:
    """Convert a model, dataclass, or mapping into a plain JSON-ready dict."""
    plain = to_jsonable_python(value)
    if not isinstance(plain, dict):
        raise TypeError(
            f"{type(value).__name__} does not encode to a key/value mapping"
        )
    return plain


@lru_cache(maxsize=256)
def _adapter(shape: Any) -> TypeAdapter[Any]:
    """Return one cached validator for a response shape."""
    return TypeAdapter(shape)
