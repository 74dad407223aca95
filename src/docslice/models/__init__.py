"""Domain models for docslice."""

from docslice.models.enums import DeclarationKind, DuplicatePolicy
from docslice.models.example import Example, ExampleHandle
from docslice.models.source import Declaration, SourceUnit

__all__ = [
    "Declaration",
    "DeclarationKind",
    "DuplicatePolicy",
    "Example",
    "ExampleHandle",
    "SourceUnit",
]
