"""Parse the Python files of one directory into declarations."""

import ast
import fnmatch
import inspect
import logging
from pathlib import Path
from typing import Optional

from docslice.config.models import ScanConfig
from docslice.errors import ParseError
from docslice.models.enums import DeclarationKind
from docslice.models.source import Declaration, SourceUnit

logger = logging.getLogger("docslice.context.source_parser")

FUNCTION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef)


class SourceParser:
    """Turns source files into SourceUnit objects."""

    def __init__(self, config: Optional[ScanConfig] = None):
        """Initialize the parser.

        Args:
            config: Scan configuration; defaults are used when omitted.
        """
        self.config = config or ScanConfig()

    def list_files(self, directory: Path) -> list[Path]:
        """List the source files directly inside a directory, sorted by name.

        Args:
            directory: Directory to scan. Subdirectories are not visited.

        Returns:
            Paths of the matching files.
        """
        if not directory.is_dir():
            raise NotADirectoryError(str(directory))

        files = []
        for path in sorted(directory.glob(self.config.source_glob)):
            if not path.is_file():
                continue
            if any(fnmatch.fnmatch(path.name, p) for p in self.config.exclude_patterns):
                logger.debug(f"Excluded {path.name}")
                continue
            files.append(path)
        return files

    def is_test_file(self, path: Path) -> bool:
        """Check whether a file may hold runnable examples."""
        return any(fnmatch.fnmatch(path.name, p) for p in self.config.test_patterns)

    def parse_dir(self, directory: Path) -> list[SourceUnit]:
        """Parse every source file of a directory.

        Raises:
            ParseError: If any file fails to parse.
        """
        return [self.parse_file(path) for path in self.list_files(directory)]

    def parse_file(self, path: Path) -> SourceUnit:
        """Read and parse a single file."""
        try:
            source = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(path, str(e)) from e
        return self.parse_source(source, path)

    def parse_source(self, source: str, path: Path) -> SourceUnit:
        """Parse source text into a SourceUnit.

        Args:
            source: Python source code.
            path: Path the source was read from.

        Returns:
            The parsed unit with its top-level declarations. Methods of
            top-level classes are reported as declarations of their own.
        """
        try:
            tree = ast.parse(source, filename=str(path))
        except SyntaxError as e:
            raise ParseError(path, e.msg, e.lineno) from e
        except ValueError as e:
            # Source containing null bytes
            raise ParseError(path, str(e)) from e

        lines = source.splitlines()
        declarations: list[Declaration] = []

        for i, node in enumerate(tree.body):
            following = tree.body[i + 1] if i + 1 < len(tree.body) else None

            if isinstance(node, FUNCTION_NODES):
                declarations.append(
                    Declaration(
                        kind=DeclarationKind.FUNCTION,
                        names=[node.name],
                        doc=_docstring(node),
                        lineno=node.lineno,
                    )
                )
            elif isinstance(node, ast.ClassDef):
                declarations.append(_class_declaration(node, lines))
                declarations.extend(_method_declarations(node))
            elif isinstance(node, (ast.Assign, ast.AnnAssign)):
                declarations.append(
                    Declaration(
                        kind=DeclarationKind.VALUE,
                        names=bound_names(node),
                        doc=_assignment_doc(node, following, lines),
                        lineno=node.lineno,
                    )
                )

        logger.debug(f"Parsed {path.name}: {len(declarations)} declarations")
        return SourceUnit(
            path=path,
            source=source,
            tree=tree,
            doc=_docstring(tree),
            declarations=declarations,
        )


def comment_text(line: str) -> str:
    """Strip the comment marker (``#`` or ``#:``) and one following space."""
    stripped = line.strip()
    text = stripped[2:] if stripped.startswith("#:") else stripped[1:]
    return text[1:] if text.startswith(" ") else text


def bound_names(node: ast.stmt) -> list[str]:
    """Plain names bound by an assignment, in declaration order."""
    targets = node.targets if isinstance(node, ast.Assign) else [node.target]
    names: list[str] = []
    for target in targets:
        names.extend(_target_names(target))
    return names


def _target_names(target: ast.expr) -> list[str]:
    if isinstance(target, ast.Name):
        return [target.id]
    if isinstance(target, (ast.Tuple, ast.List)):
        names = []
        for element in target.elts:
            names.extend(_target_names(element))
        return names
    if isinstance(target, ast.Starred):
        return _target_names(target.value)
    # Attribute and subscript targets bind no name
    return []


def _docstring(node: ast.AST) -> str:
    return ast.get_docstring(node) or ""


def _leading_comment(lines: list[str], lineno: int, col_offset: int = 0) -> str:
    """Collect the comment block directly above a 1-based line number.

    Only comment lines starting at ``col_offset`` belong to the block.
    """
    collected = []
    i = lineno - 2
    while i >= 0:
        line = lines[i]
        stripped = line.strip()
        if not stripped.startswith("#") or stripped.startswith("#!"):
            break
        if len(line) - len(line.lstrip()) != col_offset:
            break
        collected.append(comment_text(stripped))
        i -= 1

    text = "\n".join(reversed(collected))
    return text + "\n" if text.strip() else ""


def _assignment_doc(node: ast.stmt, following: Optional[ast.stmt], lines: list[str]) -> str:
    """Doc of an assignment: an attribute docstring, else the comment above it."""
    if (
        isinstance(following, ast.Expr)
        and isinstance(following.value, ast.Constant)
        and isinstance(following.value.value, str)
    ):
        return inspect.cleandoc(following.value.value)
    return _leading_comment(lines, node.lineno, node.col_offset)


def _is_class_var(annotation: ast.expr) -> bool:
    target = annotation.value if isinstance(annotation, ast.Subscript) else annotation
    return ast.unparse(target) in ("ClassVar", "typing.ClassVar")


def _class_declaration(node: ast.ClassDef, lines: list[str]) -> Declaration:
    fields = []
    for i, item in enumerate(node.body):
        if not isinstance(item, ast.AnnAssign) or not isinstance(item.target, ast.Name):
            continue
        if _is_class_var(item.annotation):
            continue
        following = node.body[i + 1] if i + 1 < len(node.body) else None
        fields.append(
            Declaration(
                kind=DeclarationKind.FIELD,
                names=[item.target.id],
                doc=_assignment_doc(item, following, lines),
                lineno=item.lineno,
            )
        )

    return Declaration(
        kind=DeclarationKind.TYPE,
        names=[node.name],
        doc=_docstring(node),
        fields=fields,
        is_record=bool(fields),
        lineno=node.lineno,
    )


def _mentions_self_type(annotation: ast.expr) -> bool:
    for child in ast.walk(annotation):
        if isinstance(child, ast.Name) and child.id == "Self":
            return True
        if isinstance(child, ast.Attribute) and child.attr == "Self":
            return True
    return False


def _host_expression(cls: ast.ClassDef, func: ast.stmt) -> ast.expr:
    """Type expression a method is bound to.

    This is the annotation of ``self``/``cls`` when the method carries one,
    otherwise the enclosing class name.
    """
    default = ast.Name(id=cls.name, ctx=ast.Load())

    for decorator in func.decorator_list:
        if isinstance(decorator, ast.Name) and decorator.id == "staticmethod":
            return default

    params = func.args.posonlyargs + func.args.args
    if not params or params[0].annotation is None:
        return default

    annotation = params[0].annotation
    if _mentions_self_type(annotation):
        return default
    return annotation


def _method_declarations(node: ast.ClassDef) -> list[Declaration]:
    return [
        Declaration(
            kind=DeclarationKind.METHOD,
            names=[item.name],
            doc=_docstring(item),
            host=_host_expression(node, item),
            lineno=item.lineno,
        )
        for item in node.body
        if isinstance(item, FUNCTION_NODES)
    ]
