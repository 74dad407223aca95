"""Models for runnable examples captured from test files."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel


class Example(BaseModel):
    """A runnable example function found in a test file."""

    name: str  # Declared name with the example prefix stripped
    key: str  # Index key, the full function name
    doc: str = ""

    # Captured source
    code: str  # Header plus body, comments included
    is_block: bool = True  # False when the body sits on the header line
    header_lines: int = 1  # Lines of code taken by the def header
    indent: str = ""  # Indentation of the body, empty when unknown

    # Recorded expected output
    output: str = ""
    has_output: bool = False
    unordered: bool = False
    output_line: Optional[int] = None  # Line of code where the output comments start

    # Self-contained script, None when one cannot be assembled
    play: Optional[str] = None

    path: Optional[Path] = None
    lineno: int = 0


class ExampleHandle(BaseModel):
    """Reference to an example handed out by the lookup API."""

    key: str
    example: Example

    @property
    def name(self) -> str:
        """Declared example name."""
        return self.example.name
