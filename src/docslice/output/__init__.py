"""Output layer: example rendering and the template-facing lookup API."""

from docslice.output.lookup import DocLookup
from docslice.output.renderer import ExampleRenderer

__all__ = ["DocLookup", "ExampleRenderer"]
