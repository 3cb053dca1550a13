"""
Cache Key Generation

Keys are a fixed-length digest of a structural fingerprint of
{operation name, filtered positional args, keyword args}.

Fingerprint rules:
    - Walks containers up to KEY_FINGERPRINT_DEPTH levels; anything deeper
      becomes an opaque leaf (its type name), which also terminates cycles
    - Mappings are serialized with sorted keys so insertion order is irrelevant
    - Sets are ordered by the fingerprint of their elements
    - Dataclasses, pydantic models and plain objects (__dict__ or __slots__)
      are walked through their fields
    - Non-finite floats and out-of-range ints are tagged, since JSON has no
      encoding for them

MD5 is used for speed; collisions are an accepted risk for a cache.
"""

import dataclasses
import hashlib
import math
from collections.abc import Iterable, Mapping, Set
from typing import Any

import orjson

from memocache.core.config.constants import KEY_FINGERPRINT_DEPTH

_PRIMITIVES = (str, int, float, bool, type(None))
_INT_MIN = -(2**63)
_INT_MAX = 2**64 - 1


def filter_args(args: tuple, skip_args: Iterable[int] | None) -> tuple:
    """
    Drop the positional arguments listed in skip_args.

    Args:
        args: Positional arguments of the call
        skip_args: Indexes to exclude from the key

    Returns:
        Remaining arguments, in their original order
    """
    if not skip_args:
        return tuple(args)
    skip = set(skip_args)
    return tuple(arg for index, arg in enumerate(args) if index not in skip)


def _opaque(value: Any) -> str:
    return f"<{type(value).__qualname__}>"


def _slot_values(value: Any) -> dict[str, Any] | None:
    """Attribute values of a __slots__ object, or None if the type declares no slots."""
    slots: list[str] = []
    for cls in type(value).__mro__:
        declared = cls.__dict__.get("__slots__", ())
        slots.extend([declared] if isinstance(declared, str) else declared)
    if not slots:
        return None
    missing = object()
    values = {}
    for name in slots:
        attr = getattr(value, name, missing)
        if attr is not missing:
            values[name] = attr
    return values


def _normalize(value: Any, depth: int) -> Any:
    """Convert a value into a JSON-serializable structure, bounded by depth."""
    if isinstance(value, int) and not isinstance(value, bool) and not _INT_MIN <= value <= _INT_MAX:
        # orjson only encodes 64-bit integers
        return {"__int__": str(value)}

    if isinstance(value, float) and not math.isfinite(value):
        # orjson encodes nan and inf as null
        return {"__float__": repr(value)}

    if isinstance(value, _PRIMITIVES):
        return value

    if depth <= 0:
        return _opaque(value)

    if isinstance(value, bytes | bytearray | memoryview):
        return {"__bytes__": bytes(value).hex()}

    if isinstance(value, Mapping):
        return {repr(k): _normalize(v, depth - 1) for k, v in value.items()}

    if isinstance(value, Set):
        items = [_normalize(item, depth - 1) for item in value]
        return {"__set__": sorted(items, key=lambda item: orjson.dumps(item, option=orjson.OPT_SORT_KEYS))}

    if isinstance(value, list | tuple):
        return [_normalize(item, depth - 1) for item in value]

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        fields = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
        return {_opaque(value): _normalize(fields, depth - 1)}

    model_dump = getattr(value, "model_dump", None)
    if callable(model_dump) and not isinstance(value, type):
        return {_opaque(value): _normalize(model_dump(), depth - 1)}

    if callable(value):
        return f"<callable {getattr(value, '__module__', '')}.{getattr(value, '__qualname__', _opaque(value))}>"

    attributes = getattr(value, "__dict__", None)
    if attributes is None and type(value).__repr__ is object.__repr__:
        # Default repr embeds the object id
        attributes = _slot_values(value)
    if attributes is not None:
        return {_opaque(value): _normalize(attributes, depth - 1)}

    return repr(value)


def fingerprint(value: Any, depth: int = KEY_FINGERPRINT_DEPTH) -> bytes:
    """
    Deterministic structural serialization of a value.

    Args:
        value: Any value
        depth: Recursion limit

    Returns:
        Canonical JSON bytes
    """
    return orjson.dumps(_normalize(value, depth), option=orjson.OPT_SORT_KEYS)


def derive_key(
    name: str,
    args: tuple,
    kwargs: Mapping[str, Any] | None = None,
    depth: int = KEY_FINGERPRINT_DEPTH,
) -> str:
    """
    Derive the cache key for a call.

    Args:
        name: Cached operation name
        args: Positional arguments, already filtered by skip positions
        kwargs: Keyword arguments
        depth: Fingerprint recursion limit

    Returns:
        32-character hex digest
    """
    payload: dict[str, Any] = {"f": name, "a": list(args)}
    if kwargs:
        payload["k"] = dict(kwargs)
    return hashlib.md5(fingerprint(payload, depth)).hexdigest()
