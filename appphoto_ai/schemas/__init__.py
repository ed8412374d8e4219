"""Pydantic schemas for extracted records and chat messages."""

from appphoto_ai.schemas.chat import ChatMessage, Role
from appphoto_ai.schemas.extraction import (
    EXPORT_COLUMNS,
    RECORD_FIELDS,
    ExtractedRecord,
    document_json_schema,
    flatten_record,
    normalize_records,
    record_json_schema,
)

__all__ = [
    "ChatMessage",
    "Role",
    "ExtractedRecord",
    "RECORD_FIELDS",
    "EXPORT_COLUMNS",
    "record_json_schema",
    "document_json_schema",
    "normalize_records",
    "flatten_record",
]
