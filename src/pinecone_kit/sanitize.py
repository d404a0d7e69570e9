# src/pinecone_kit/sanitize.py

"""Null stripping for request payloads.

Pinecone rejects ``null`` inside metadata and filters. Callers may still
pass ``None`` for convenience; it is removed here before transmission.
"""

from collections.abc import Mapping
from typing import Any

# Only these payload fields carry user metadata and get stripped.
NULL_STRIPPED_FIELDS = ("metadata", "filter", "setMetadata")


def remove_null_values_from_object(
    obj: Mapping[str, Any] | None,
) -> dict[str, Any] | None:
    """Recursively drop keys whose value is ``None``.

    Nested mappings are rebuilt; lists are passed through as-is and never
    descended into. The input is not mutated.
    """
    if obj is None:
        return None

    result: dict[str, Any] = {}
    for key, value in obj.items():
        if value is None:
            continue
        if isinstance(value, Mapping):
            result[key] = remove_null_values_from_object(value)
        else:
            result[key] = value
    return result


def remove_null_values(payload: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Strip nulls from the metadata/filter/setMetadata fields of a payload.

    Every other field is copied unchanged.
    """
    if payload is None:
        return None

    result = dict(payload)
    for field in NULL_STRIPPED_FIELDS:
        if field not in result:
            continue
        if result[field] is None:
            del result[field]
        else:
            result[field] = remove_null_values_from_object(result[field])
    return result
