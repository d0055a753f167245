"""JSON codec for group collections and export envelopes.

Absent optional fields (no layout blob, no slot) are omitted rather than
written as ``null``, so text produced here decodes and re-encodes to the
identical string.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import TypeAdapter, ValidationError

from tabstash.models import ExportEnvelope, Group

_GROUPS = TypeAdapter(list[Group])


class CodecError(ValueError):
    """Raised when stored or imported text is not a recognised group payload."""


def encode_groups(groups: Sequence[Group]) -> str:
    """Compact JSON array, as stored in the settings store."""
    return _GROUPS.dump_json(list(groups), by_alias=True, exclude_none=True).decode("utf-8")


def decode_groups(text: str) -> list[Group]:
    try:
        return _GROUPS.validate_json(text)
    except ValidationError as exc:
        msg = f"Invalid group collection: {exc.error_count()} error(s)"
        raise CodecError(msg) from exc


def encode_envelope(envelope: ExportEnvelope, indent: int | None = 2) -> str:
    return envelope.model_dump_json(by_alias=True, exclude_none=True, indent=indent)


def decode_envelope(text: str) -> ExportEnvelope:
    try:
        return ExportEnvelope.model_validate_json(text)
    except ValidationError as exc:
        msg = f"Invalid export envelope: {exc.error_count()} error(s)"
        raise CodecError(msg) from exc
