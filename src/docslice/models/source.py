"""Models for parsed source files and their declarations."""

import ast
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from docslice.models.enums import DeclarationKind


class Declaration(BaseModel):
    """A named entity declared in a source file."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: DeclarationKind
    names: list[str] = Field(default_factory=list)  # Every bound name, in order
    doc: str = ""
    lineno: int = 0

    # Methods: the type expression the method is associated with
    host: Optional[ast.expr] = None

    # Classes: annotated attributes declared in the class body
    fields: list["Declaration"] = Field(default_factory=list)
    is_record: bool = False

    @property
    def name(self) -> str:
        """First declared name, or an empty string when nothing is bound."""
        return self.names[0] if self.names else ""

    @property
    def is_public(self) -> bool:
        """Whether the first name is externally visible."""
        return bool(self.names) and not self.names[0].startswith("_")


Declaration.model_rebuild()


class SourceUnit(BaseModel):
    """One parsed source file."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    path: Path
    source: str
    tree: ast.Module
    doc: str = ""
    declarations: list[Declaration] = Field(default_factory=list)

    @property
    def filename(self) -> str:
        """Base name of the file."""
        return self.path.name

    @property
    def lines(self) -> list[str]:
        """Source split into lines, without line endings."""
        return self.source.splitlines()
