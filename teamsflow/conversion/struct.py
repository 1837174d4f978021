"""Protobuf Struct (proto-JSON form) → plain JSON.

gRPC clients hand custom payloads back as google.protobuf.Struct:

    {"fields": {"teams": {"structValue": {"fields": {...}}}}}

REST clients already return plain JSON. `struct_to_json` accepts either
and always returns plain Python values.
"""

from typing import Any


def is_struct(value: Any) -> bool:
    """True if value looks like a proto-JSON Struct."""
    return (
        isinstance(value, dict)
        and set(value) == {"fields"}
        and isinstance(value["fields"], dict)
    )


def value_to_json(value: Any) -> Any:
    """Decode a single proto-JSON google.protobuf.Value."""
    if not isinstance(value, dict):
        return value

    kind = value.get("kind")
    if isinstance(kind, str) and kind in value:
        # node protobufjs adds a "kind" oneof discriminator
        return value_to_json({kind: value[kind]})

    if "nullValue" in value:
        return None
    if "numberValue" in value:
        return value["numberValue"]
    if "stringValue" in value:
        return value["stringValue"]
    if "boolValue" in value:
        return value["boolValue"]
    if "structValue" in value:
        return struct_to_json(value["structValue"])
    if "listValue" in value:
        items = (value["listValue"] or {}).get("values") or []
        return [value_to_json(v) for v in items]
    return value


def struct_to_json(struct: Any) -> Any:
    """Decode a Struct into a dict. Plain JSON passes through unchanged."""
    if not is_struct(struct):
        return struct
    return {key: value_to_json(val) for key, val in struct["fields"].items()}
