"""Index of doc entries and examples for one source directory."""

import ast
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, TypeVar, Union

from docslice.config.models import ScanConfig
from docslice.context.examples import ExampleExtractor
from docslice.context.source_parser import SourceParser
from docslice.errors import DuplicateNameError, NotFoundError
from docslice.models.enums import DeclarationKind, DuplicatePolicy
from docslice.models.example import Example
from docslice.models.source import Declaration, SourceUnit

logger = logging.getLogger("docslice.context.index")

V = TypeVar("V")

# Wrappers whose argument names the host type, as in ``cls: type[Client]``
TYPE_WRAPPERS = ("type", "Type", "typing.Type")


def host_name(expr: ast.expr) -> str:
    """Normalize a method's host type expression to the underlying type name.

    ``"Client"``, ``type[Client]``, ``Client[T]`` and ``pkg.Client`` all
    become ``Client``.
    """
    if isinstance(expr, ast.Constant) and isinstance(expr.value, str):
        # Forward reference
        try:
            parsed = ast.parse(expr.value.strip(), mode="eval")
        except SyntaxError:
            return expr.value.strip()
        return host_name(parsed.body)
    if isinstance(expr, ast.Subscript):
        if ast.unparse(expr.value) in TYPE_WRAPPERS:
            return host_name(expr.slice)
        return host_name(expr.value)
    if isinstance(expr, ast.Attribute):
        return expr.attr
    if isinstance(expr, ast.Name):
        return expr.id
    return ast.unparse(expr)


def file_key(filename: str) -> str:
    """Key of a module docstring: the filename with dots replaced."""
    return filename.replace(".", "_")


class DocIndex:
    """Read-only mappings of doc keys to text and example keys to examples.

    Built once per invocation with :meth:`build` and passed by reference to
    whatever renders from it; it is never updated in place.
    """

    def __init__(
        self,
        name: str,
        docs: Mapping[str, str],
        examples: Mapping[str, Example],
        directory: Optional[Path] = None,
    ):
        """Initialize the index.

        Args:
            name: Name of the indexed package.
            docs: Doc key to doc text.
            examples: Example key to example.
            directory: Directory the index was built from.
        """
        self.name = name
        self.directory = directory
        self._docs = MappingProxyType(dict(docs))
        self._examples = MappingProxyType(dict(examples))

    @classmethod
    def build(
        cls,
        directory: Union[str, Path],
        config: Optional[ScanConfig] = None,
    ) -> "DocIndex":
        """Scan a directory and build its index.

        Raises:
            ParseError: If any file fails to parse; nothing is indexed then.
        """
        return IndexBuilder(config).build(Path(directory))

    @property
    def docs(self) -> Mapping[str, str]:
        """All doc entries."""
        return self._docs

    @property
    def examples(self) -> Mapping[str, Example]:
        """All examples."""
        return self._examples

    def doc(self, name: str) -> str:
        """Get the doc text recorded under a key.

        Raises:
            NotFoundError: If no doc has that key.
        """
        try:
            return self._docs[name]
        except KeyError:
            raise NotFoundError("doc", name) from None

    def example(self, name: str) -> Example:
        """Get the example recorded under a key.

        Raises:
            NotFoundError: If no example has that key.
        """
        try:
            return self._examples[name]
        except KeyError:
            raise NotFoundError("example", name) from None

    def __repr__(self) -> str:
        return f"DocIndex(name='{self.name}', docs={len(self._docs)}, examples={len(self._examples)})"


class IndexBuilder:
    """Builds a DocIndex from the source files of one directory."""

    def __init__(
        self,
        config: Optional[ScanConfig] = None,
        parser: Optional[SourceParser] = None,
        extractor: Optional[ExampleExtractor] = None,
    ):
        """Initialize the builder.

        Args:
            config: Scan configuration.
            parser: Source parser; one is created from config when omitted.
            extractor: Example extractor; one is created from config when omitted.
        """
        self.config = config or ScanConfig()
        self.parser = parser or SourceParser(self.config)
        self.extractor = extractor or ExampleExtractor(self.config)

    def build(self, directory: Path) -> DocIndex:
        """Parse a directory and index it.

        Every file is parsed before anything is recorded, so a parse failure
        leaves no partial index behind.
        """
        units = self.parser.parse_dir(directory)

        docs: dict[str, str] = {}
        examples: dict[str, Example] = {}
        doc_origins: dict[str, str] = {}
        example_origins: dict[str, str] = {}

        for unit in units:
            if self.parser.is_test_file(unit.path):
                for example in self.extractor.extract(unit):
                    origin = f"{unit.filename}:{example.lineno}"
                    self._record(examples, example_origins, example.key, example, origin)
            self._scan_unit(unit, docs, doc_origins)

        name = directory.name
        if name.endswith("_test"):
            name = name[: -len("_test")]

        logger.info(
            f"Indexed {len(docs)} docs and {len(examples)} examples "
            f"from {len(units)} files in {directory}"
        )
        return DocIndex(name, docs, examples, directory)

    def _scan_unit(self, unit: SourceUnit, docs: dict[str, str], origins: dict[str, str]) -> None:
        """Record the doc entries of one file."""
        if unit.doc.strip():
            self._record(docs, origins, file_key(unit.filename), unit.doc, unit.filename)

        for decl in unit.declarations:
            key = self._key(decl)
            if key is not None and decl.doc.strip():
                self._record(docs, origins, key, decl.doc, f"{unit.filename}:{decl.lineno}")

            if decl.kind == DeclarationKind.TYPE and decl.is_record:
                for field in decl.fields:
                    if field.doc.strip() and field.is_public:
                        self._record(
                            docs,
                            origins,
                            f"{decl.name}.{field.name}",
                            field.doc,
                            f"{unit.filename}:{field.lineno}",
                        )

    def _key(self, decl: Declaration) -> Optional[str]:
        """Derive the lookup key of a documented declaration."""
        if decl.kind == DeclarationKind.METHOD:
            return f"{host_name(decl.host)}.{decl.name}"
        if decl.kind == DeclarationKind.VALUE and not decl.names:
            return None
        return decl.name

    def _record(
        self,
        mapping: dict[str, V],
        origins: dict[str, str],
        key: str,
        value: V,
        origin: str,
    ) -> None:
        """Store an entry, applying the duplicate policy on collisions."""
        if key in mapping:
            if self.config.on_duplicate == DuplicatePolicy.ERROR:
                raise DuplicateNameError(key, origins[key], origin)
            logger.debug(f"Key {key} from {origins[key]} overwritten by {origin}")

        mapping[key] = value
        origins[key] = origin
