"""DAG-JSON codec for the IPLD data model.

Produces the canonical DAG-JSON byte form used for queue message bodies:

- map keys are strings, sorted by code point (equivalently by UTF-8 bytes)
- no insignificant whitespace
- links encode as ``{"/": "<cid>"}`` (CIDv1 in base32, CIDv0 in base58btc)
- bytes encode as ``{"/": {"bytes": "<standard base64, unpadded>"}}``

Decoding restores links to ``multiformats.CID`` and bytes to ``bytes``, so
``loads(dumps(value)) == value`` for every value of the data model.
"""

from __future__ import annotations

import base64
import json
import math
from collections.abc import Mapping
from typing import Any

from multiformats import CID

_LINK_KEY = "/"


class EncodingError(ValueError):
    """Value cannot be expressed in the DAG-JSON data model."""


class DecodingError(ValueError):
    """Input is not well-formed DAG-JSON."""


# ── Encoding ────────────────────────────────────────────────────────────────


def _encode_cid(cid: CID) -> str:
    if cid.version == 0:
        return str(cid)
    return cid.encode("base32")


def _to_json(value: Any, path: str) -> Any:
    """Convert a data-model value into plain JSON types."""
    # bool before int: bool is an int subclass
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise EncodingError(f"non-finite float at {path}: {value!r}")
        return value
    if isinstance(value, CID):
        return {_LINK_KEY: _encode_cid(value)}
    if isinstance(value, (bytes, bytearray, memoryview)):
        encoded = base64.b64encode(bytes(value)).decode("ascii").rstrip("=")
        return {_LINK_KEY: {"bytes": encoded}}
    if isinstance(value, (list, tuple)):
        return [_to_json(item, f"{path}[{i}]") for i, item in enumerate(value)]
    if isinstance(value, Mapping):
        out: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise EncodingError(f"map key at {path} must be a string, got {type(key).__name__}")
            out[key] = _to_json(item, f"{path}.{key}")
        if _LINK_KEY in out and len(out) == 1:
            raise EncodingError(f"map at {path} uses the reserved '/' key on its own")
        return out
    raise EncodingError(f"unsupported type at {path}: {type(value).__name__}")


def dumps(value: Any) -> bytes:
    """Encode a data-model value as canonical DAG-JSON bytes.

    Raises:
        EncodingError: If the value (or anything nested in it) cannot be
            represented.
    """
    converted = _to_json(value, "$")
    try:
        text = json.dumps(
            converted,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as exc:
        raise EncodingError(str(exc)) from exc
    return text.encode("utf-8")


# ── Decoding ────────────────────────────────────────────────────────────────


def _object_hook(obj: dict[str, Any]) -> Any:
    if _LINK_KEY not in obj or len(obj) != 1:
        return obj
    inner = obj[_LINK_KEY]
    if isinstance(inner, str):
        try:
            return CID.decode(inner)
        except Exception as exc:
            raise DecodingError(f"invalid link {inner!r}: {exc}") from exc
    if isinstance(inner, dict) and set(inner) == {"bytes"} and isinstance(inner["bytes"], str):
        raw = inner["bytes"]
        try:
            return base64.b64decode(raw + "=" * (-len(raw) % 4), validate=True)
        except ValueError as exc:
            raise DecodingError(f"invalid bytes {raw!r}: {exc}") from exc
    raise DecodingError(f"malformed reserved '/' form: {obj!r}")


def loads(data: bytes | str) -> Any:
    """Decode DAG-JSON bytes into data-model values.

    Raises:
        DecodingError: If the input is not valid UTF-8 JSON or carries a
            malformed link or bytes form.
    """
    try:
        text = data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data
        return json.loads(text, object_hook=_object_hook)
    except DecodingError:
        raise
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodingError(str(exc)) from exc
