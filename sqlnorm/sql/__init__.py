"""
Dialect-parameterized SQL synthesis.
"""

from sqlnorm.sql import builder
from sqlnorm.sql.dialects import Dialect, DialectProfile, profile_for
from sqlnorm.sql.formatter import format_value, parse_timestamp, quote_text
from sqlnorm.sql.payload import SqlPayload, split_statements
from sqlnorm.sql.predicates import (
    And,
    Equals,
    FieldRef,
    FieldSet,
    Not,
    Or,
    Predicate,
    compile_predicate,
    eq,
    field,
)

__all__ = [
    "builder",
    "Dialect",
    "DialectProfile",
    "profile_for",
    "format_value",
    "parse_timestamp",
    "quote_text",
    "SqlPayload",
    "split_statements",
    "Predicate",
    "Equals",
    "And",
    "Or",
    "Not",
    "FieldRef",
    "FieldSet",
    "field",
    "eq",
    "compile_predicate",
]
