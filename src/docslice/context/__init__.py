"""Context layer: parse sources, capture examples and index their docs."""

from docslice.context.examples import ExampleExtractor
from docslice.context.index import DocIndex, IndexBuilder
from docslice.context.slices import parse_doc_reference, resolve_slice
from docslice.context.source_parser import SourceParser

__all__ = [
    "DocIndex",
    "ExampleExtractor",
    "IndexBuilder",
    "SourceParser",
    "parse_doc_reference",
    "resolve_slice",
]
