"""Enumerations used throughout docslice."""

from enum import Enum


class DeclarationKind(str, Enum):
    """Kinds of declarations the source parser reports."""

    FUNCTION = "function"
    METHOD = "method"
    TYPE = "type"
    FIELD = "field"
    VALUE = "value"


class DuplicatePolicy(str, Enum):
    """What the index builder does when two declarations derive the same key."""

    OVERWRITE = "overwrite"  # Later declaration wins silently
    ERROR = "error"  # Raise DuplicateNameError
