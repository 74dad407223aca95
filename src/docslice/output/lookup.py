"""Lookup API handed to the template layer of a document generator."""

import logging
from functools import partial
from typing import Callable, Optional

from docslice.config.models import DocsliceConfig
from docslice.context.index import DocIndex
from docslice.context.slices import parse_doc_reference, resolve_slice
from docslice.models.example import ExampleHandle
from docslice.output.renderer import ExampleRenderer

logger = logging.getLogger("docslice.output.lookup")


class DocLookup:
    """Serves doc excerpts and example renderings from a built index."""

    def __init__(self, index: DocIndex, config: Optional[DocsliceConfig] = None):
        """Initialize the lookup.

        Args:
            index: Index to serve from, built once per invocation.
            config: Configuration for slicing and rendering.
        """
        self.index = index
        self.config = config or DocsliceConfig()
        self.renderer = ExampleRenderer(index, self.config.render)

    def lookup_doc(self, name: str, slice_spec: Optional[str] = None) -> str:
        """Get a doc entry, or the sentences of it a slice spec selects.

        Args:
            name: Doc key, or an inline reference such as ``Client.send[0:2]``.
            slice_spec: Slice spec; when given, ``name`` is taken as a plain key.

        Returns:
            The whole doc trimmed of surrounding newlines when no slice is
            requested, otherwise the reassembled excerpt.

        Raises:
            NotFoundError: If the doc key is unknown.
            SliceError: If the slice spec is malformed or out of range.
        """
        if slice_spec is None:
            full_spec = name
            name, slice_spec = parse_doc_reference(name)
        else:
            full_spec = f"{name}[{slice_spec}]"

        text = self.index.doc(name)
        if slice_spec is None:
            return text.strip("\n")

        logger.debug(f"Slicing doc {name} with {slice_spec}")
        return resolve_slice(full_spec, slice_spec, text, self.config.slices.terminator)

    def lookup_example(self, name: str) -> ExampleHandle:
        """Get a handle on an example.

        Raises:
            NotFoundError: If the example is unknown.
        """
        return ExampleHandle(key=name, example=self.index.example(name))

    def render_example_code(self, handle: ExampleHandle, annotated: bool = False) -> str:
        """Render an example's code, see ExampleRenderer.render_code."""
        return self.renderer.render_code(handle.key, annotated=annotated)

    def render_example_output(self, handle: ExampleHandle) -> str:
        """Render an example's recorded output."""
        return self.renderer.captured_output(handle.key)

    def render_playground(self, handle: ExampleHandle) -> str:
        """Render an example as a standalone script.

        Raises:
            RenderError: If the script cannot be formatted.
        """
        return self.renderer.playground_form(handle.key)

    def template_functions(self) -> dict[str, Callable[[str], str]]:
        """Functions a template layer binds to placeholders.

        Returns:
            Mapping of function name to callable taking a doc reference or
            an example key.
        """
        return {
            "doc": self.lookup_doc,
            "example": partial(self.renderer.render_code, annotated=True),
            "code": partial(self.renderer.render_code, annotated=False),
            "output": self.renderer.captured_output,
            "play": self.renderer.playground_form,
        }
