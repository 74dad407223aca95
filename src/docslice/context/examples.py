"""Capture runnable examples from test files.

An example is a parameterless top-level function whose name starts with the
configured prefix (``example_`` by default)::

    def example_hello():
        print(hello("world"))
        # Output:
        # Hello, world!

A trailing comment group opening with ``Output:`` (or ``Unordered output:``)
records the expected output.
"""

import ast
import builtins
import logging
import re
from typing import Optional

from docslice.config.models import ScanConfig
from docslice.context.source_parser import bound_names, comment_text
from docslice.models.example import Example
from docslice.models.source import SourceUnit

logger = logging.getLogger("docslice.context.examples")

# Matches the start of an output comment group (comment marker already stripped)
OUTPUT_PREFIX = re.compile(r"^\s*(unordered )?output:", re.IGNORECASE)


class ExampleExtractor:
    """Finds example functions in a parsed test file."""

    def __init__(self, config: Optional[ScanConfig] = None):
        """Initialize the extractor.

        Args:
            config: Scan configuration holding the example prefix.
        """
        self.config = config or ScanConfig()

    def extract(self, unit: SourceUnit) -> list[Example]:
        """Capture every example declared in a unit.

        Args:
            unit: Parsed test file.

        Returns:
            Examples in declaration order.
        """
        prefix = self.config.example_prefix
        lines = unit.lines
        examples = []

        for node in unit.tree.body:
            if not isinstance(node, ast.FunctionDef) or not node.name.startswith(prefix):
                continue
            if _has_parameters(node):
                logger.debug(f"Skipping {node.name} in {unit.filename}: takes parameters")
                continue
            examples.append(self._capture(unit, node, lines))

        return examples

    def _capture(self, unit: SourceUnit, node: ast.FunctionDef, lines: list[str]) -> Example:
        docstring = _docstring_node(node)
        statements = node.body[1:] if docstring is not None else node.body
        header_end = _header_end(lines, node)
        is_block = node.body[0].lineno - 1 > header_end

        if is_block:
            start = header_end + 1
            if docstring is not None:
                start = max(start, docstring.end_lineno)
            header = lines[node.lineno - 1 : header_end + 1]
            body_lines = lines[start : _block_end(lines, node)]
            code = "\n".join(header + body_lines)
        else:
            header = []
            body_lines = []
            code = "; ".join(
                ast.get_source_segment(unit.source, stmt) or "" for stmt in node.body
            )

        indent = ""
        if statements:
            first = lines[statements[0].lineno - 1]
            indent = first[: len(first) - len(first.lstrip())]

        # Only comments after the last statement can record output
        tail = 0
        if is_block and statements:
            tail = max(0, statements[-1].end_lineno - start)
        output, has_output, unordered, group_start = _parse_output(body_lines[tail:])
        output_line = len(header) + tail + group_start if has_output else None
        main_body = body_lines if is_block else ["    " + code]

        return Example(
            name=node.name[len(self.config.example_prefix) :],
            key=node.name,
            doc=ast.get_docstring(node) or "",
            code=code,
            is_block=is_block,
            header_lines=len(header),
            indent=indent,
            output=output,
            has_output=has_output,
            output_line=output_line,
            unordered=unordered,
            play=_playground(unit, node, main_body, bool(statements)),
            path=unit.path,
            lineno=node.lineno,
        )


def _has_parameters(node: ast.FunctionDef) -> bool:
    args = node.args
    return bool(args.posonlyargs or args.args or args.vararg or args.kwonlyargs or args.kwarg)


def _docstring_node(node: ast.FunctionDef) -> Optional[ast.Expr]:
    first = node.body[0]
    if (
        isinstance(first, ast.Expr)
        and isinstance(first.value, ast.Constant)
        and isinstance(first.value.value, str)
    ):
        return first
    return None


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip())


def _header_end(lines: list[str], node: ast.FunctionDef) -> int:
    """Index of the line holding the colon that opens the function body."""
    first = node.body[0].lineno - 1
    for index in range(node.lineno - 1, first):
        if lines[index].split("#", 1)[0].rstrip().endswith(":"):
            return index
    return first


def _block_end(lines: list[str], node: ast.stmt) -> int:
    """Index just past the last line of a block, trailing comments included.

    Comments indented under the block belong to it even though the syntax
    tree ends at the last statement.
    """
    end = node.end_lineno
    last = end
    while end < len(lines):
        line = lines[end]
        if not line.strip():
            end += 1
            continue
        if line.lstrip().startswith("#") and _indent_width(line) > node.col_offset:
            end += 1
            last = end
            continue
        break
    return last


def _parse_output(tail_lines: list[str]) -> tuple[str, bool, bool, int]:
    """Read the recorded output from the final comment group of a body.

    Args:
        tail_lines: Body lines following the last statement.

    Returns:
        Tuple of (output text, whether output was recorded, unordered flag,
        index in ``tail_lines`` where the comment group starts).
    """
    group = []
    for line in reversed(tail_lines):
        if not line.strip().startswith("#"):
            break
        group.append(comment_text(line))
    group_start = len(tail_lines) - len(group)
    if not group:
        return "", False, False, group_start

    text = "\n".join(reversed(group)) + "\n"
    match = OUTPUT_PREFIX.match(text)
    if match is None:
        return "", False, False, group_start

    output = text[match.end() :].lstrip(" ")
    if output.startswith("\n"):
        output = output[1:]
    return output, True, match.group(1) is not None, group_start


def _loaded_names(node: ast.AST) -> set[str]:
    """Free names a statement reads, minus names it binds locally."""
    loaded: set[str] = set()
    local: set[str] = set()
    for child in ast.walk(node):
        if isinstance(child, ast.Name):
            if isinstance(child.ctx, ast.Load):
                loaded.add(child.id)
            else:
                local.add(child.id)
        elif isinstance(child, ast.arg):
            local.add(child.arg)

    if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
        return loaded - local
    return loaded


def _import_binding(alias: ast.alias, is_from: bool) -> str:
    if alias.asname:
        return alias.asname
    return alias.name if is_from else alias.name.split(".")[0]


def _bindings(stmt: ast.stmt) -> set[str]:
    """Module-level names a statement binds."""
    if isinstance(stmt, ast.Import):
        return {_import_binding(a, False) for a in stmt.names}
    if isinstance(stmt, ast.ImportFrom):
        return {_import_binding(a, True) for a in stmt.names if a.name != "*"}
    if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
        return {stmt.name}
    if isinstance(stmt, (ast.Assign, ast.AnnAssign)):
        return set(bound_names(stmt))
    return set()


def _root_name(target: ast.expr) -> Optional[str]:
    """Name at the base of an attribute or subscript chain."""
    while isinstance(target, (ast.Attribute, ast.Subscript, ast.Starred)):
        target = target.value
    return target.id if isinstance(target, ast.Name) else None


def _mutated_names(stmt: ast.stmt) -> set[str]:
    """Module-level names a statement changes without rebinding them.

    Covers ``registry["key"] = ...``, ``obj.attr = ...``, ``count += 1``
    and expression statements such as ``registry.update(...)``.
    """
    if isinstance(stmt, ast.Expr):
        return _loaded_names(stmt)
    if isinstance(stmt, ast.AugAssign):
        targets = [stmt.target]
    elif isinstance(stmt, ast.Assign):
        targets = stmt.targets
    elif isinstance(stmt, ast.AnnAssign) and stmt.value is not None:
        targets = [stmt.target]
    else:
        return set()

    names = set()
    for target in targets:
        elements = target.elts if isinstance(target, (ast.Tuple, ast.List)) else [target]
        for element in elements:
            if isinstance(element, ast.Name) and not isinstance(stmt, ast.AugAssign):
                continue
            root = _root_name(element)
            if root is not None:
                names.add(root)
    return names


def _is_star_import(stmt: ast.stmt) -> bool:
    return isinstance(stmt, ast.ImportFrom) and any(a.name == "*" for a in stmt.names)


def _is_future_import(stmt: ast.stmt) -> bool:
    return isinstance(stmt, ast.ImportFrom) and stmt.module == "__future__"


def _pruned_import(stmt: ast.stmt, needed: set[str]) -> str:
    """Render an import keeping only the aliases in use."""
    is_from = isinstance(stmt, ast.ImportFrom)
    aliases = [a for a in stmt.names if _import_binding(a, is_from) in needed]
    if is_from:
        pruned = ast.ImportFrom(module=stmt.module, names=aliases, level=stmt.level)
    else:
        pruned = ast.Import(names=aliases)
    return ast.unparse(pruned)


def _statement_source(lines: list[str], stmt: ast.stmt) -> str:
    start = min([d.lineno for d in getattr(stmt, "decorator_list", [])] + [stmt.lineno])
    return "\n".join(lines[start - 1 : stmt.end_lineno])


def _playground(
    unit: SourceUnit,
    node: ast.FunctionDef,
    body_lines: list[str],
    has_statements: bool,
) -> Optional[str]:
    """Assemble a standalone script running the example as ``main()``.

    Returns:
        Script text, or None when the example depends on a relative import.
    """
    module_body = unit.tree.body
    selected: set[int] = set()
    resolved: set[str] = set()
    pending = _loaded_names(node)

    while pending:
        name = pending.pop()
        if name in resolved:
            continue
        resolved.add(name)
        for index, stmt in enumerate(module_body):
            if stmt is node or index in selected or _is_future_import(stmt):
                continue
            if name not in _bindings(stmt) and name not in _mutated_names(stmt):
                continue
            selected.add(index)
            if not isinstance(stmt, (ast.Import, ast.ImportFrom)):
                pending |= _loaded_names(stmt) - resolved

    # Names bound nowhere in the module may come from a star import
    bound = set().union(*(_bindings(stmt) for stmt in module_body))
    unresolved = resolved - bound - set(dir(builtins))
    if unresolved:
        selected |= {i for i, stmt in enumerate(module_body) if _is_star_import(stmt)}

    lines = unit.lines
    imports = []
    definitions = []
    for index in sorted(selected):
        stmt = module_body[index]
        if isinstance(stmt, (ast.Import, ast.ImportFrom)):
            if isinstance(stmt, ast.ImportFrom) and stmt.level:
                logger.debug(f"No playground for {node.name}: relative import")
                return None
            if _is_star_import(stmt):
                imports.append(ast.unparse(stmt))
            else:
                imports.append(_pruned_import(stmt, resolved))
        else:
            definitions.append(_statement_source(lines, stmt))

    main = ["def main():"] + body_lines
    if not has_statements:
        main.append("    pass")

    sections = []
    future = [_statement_source(lines, s) for s in module_body if _is_future_import(s)]
    if future:
        sections.append("\n".join(future))
    if imports:
        sections.append("\n".join(imports))
    sections.extend(definitions)
    sections.append("\n".join(main))
    sections.append('if __name__ == "__main__":\n    main()')
    return "\n\n\n".join(sections) + "\n"
