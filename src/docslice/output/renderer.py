"""Render captured examples as code, output text or standalone scripts."""

import ast
import logging
import re
from typing import Optional

from docslice.config.models import RenderConfig
from docslice.context.index import DocIndex
from docslice.errors import RenderError

logger = logging.getLogger("docslice.output.renderer")

# Blank line(s) left dangling at the end of a rendering
TRAILING_BLANK = re.compile(r"\n(?:[ \t]*\n)+\Z")

DEFINITION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)


def fix_trailing_blank(text: str) -> str:
    """Collapse blank lines left just before the end of a block."""
    return TRAILING_BLANK.sub("\n", text)


def format_script(source: str) -> str:
    """Lay out a standalone script.

    Trailing whitespace is stripped, top-level definitions are separated by
    exactly two blank lines and consecutive simple statements keep at most
    one blank line between them.

    Raises:
        SyntaxError: If the source does not parse.
    """
    tree = ast.parse(source)
    lines = [line.rstrip() for line in source.splitlines()]
    if not tree.body:
        return "\n".join(lines).strip("\n") + "\n"

    # First line of each statement, leading decorators and comments included
    starts = []
    previous_end = 0
    for stmt in tree.body:
        start = min([d.lineno for d in getattr(stmt, "decorator_list", [])] + [stmt.lineno]) - 1
        while start - 1 >= previous_end and lines[start - 1].startswith("#"):
            start -= 1
        starts.append(start)
        previous_end = stmt.end_lineno

    preamble = lines[: starts[0]]
    chunks = []
    for i, start in enumerate(starts):
        end = starts[i + 1] if i + 1 < len(starts) else len(lines)
        chunk = lines[start:end]
        gap = len(chunk)
        while chunk and not chunk[-1]:
            chunk.pop()
        chunks.append((chunk, gap > len(chunk)))

    out = "\n".join(preamble).strip("\n")
    out = out + "\n\n" if out else ""
    for i, (chunk, had_gap) in enumerate(chunks):
        out += "\n".join(chunk)
        if i + 1 == len(chunks):
            break
        if isinstance(tree.body[i], DEFINITION_NODES) or isinstance(tree.body[i + 1], DEFINITION_NODES):
            out += "\n\n\n"
        elif had_gap:
            out += "\n\n"
        else:
            out += "\n"

    return out + "\n"


class ExampleRenderer:
    """Renders the examples of a DocIndex."""

    def __init__(self, index: DocIndex, config: Optional[RenderConfig] = None):
        """Initialize the renderer.

        Args:
            index: Index holding the examples.
            config: Render configuration.
        """
        self.index = index
        self.config = config or RenderConfig()

    def render_code(self, name: str, annotated: bool = False) -> str:
        """Render an example's code.

        Args:
            name: Example key.
            annotated: Produce a fenced snippet of the body instead of the
                plain block with its output comments removed.

        Returns:
            Rendered code.

        Raises:
            NotFoundError: If the example is unknown.
        """
        example = self.index.example(name)

        if not annotated:
            if example.output_line is not None:
                kept = example.code.splitlines()[: example.output_line]
                return self._reclose("\n".join(kept))
            return fix_trailing_blank(example.code)

        if example.is_block:
            unit = example.indent or self.config.indent_unit
            body = example.code.splitlines()[example.header_lines :]
            text = "\n".join(line.removeprefix(unit) for line in body).strip()
        else:
            text = example.code.strip("\n")

        return f"```{self.config.fence_language}\n{text}\n```"

    def captured_output(self, name: str) -> str:
        """Get the recorded output of an example, empty when none was recorded.

        Raises:
            NotFoundError: If the example is unknown.
        """
        return self.index.example(name).output.strip("\n")

    def playground_form(self, name: str) -> str:
        """Format the standalone script of an example.

        Raises:
            NotFoundError: If the example is unknown.
            RenderError: If the script is missing or cannot be formatted.
        """
        example = self.index.example(name)
        if example.play is None:
            raise RenderError(name, "example has no self-contained form")

        try:
            out = format_script(example.play)
        except SyntaxError as e:
            raise RenderError(name, e) from e

        return fix_trailing_blank(out)

    def _reclose(self, text: str) -> str:
        """Close a block cut short at its output comment.

        A body left with no statements gets ``pass`` so the block stays valid.
        """
        text = text.rstrip()
        try:
            ast.parse(text)
        except SyntaxError:
            logger.debug("Output removal emptied the example body")
            text += "\n" + self.config.indent_unit + "pass"
        return text
