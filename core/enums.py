"""Core enumerations for the reporter"""

from enum import Enum


class NodeKind(str, Enum):
    """Kinds of nodes found in a record tree"""
    OBJECT = "object"
    ARRAY = "array"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"
    NULL = "null"
    DATE = "date"


class DiagnosticKind(str, Enum):
    """Data-quality warnings raised while normalizing a record"""
    MISSING_KEY_FIELD = "missing_key_field"
    INVALID_IDENTIFIER_TYPE = "invalid_identifier_type"
    INVALID_AMOUNT = "invalid_amount"
    DUPLICATE_TERM = "duplicate_term"


class RecordStatus(str, Enum):
    """Outcome of processing one record"""
    CREATED = "created"
    SKIPPED = "skipped"
    FAILED = "failed"
