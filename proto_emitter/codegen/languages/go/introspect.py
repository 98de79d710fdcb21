"""
Top-level declaration scanner for generated Go source.

Parses Go with tree-sitter and lists the file's package clause and its
general declarations (``import``, ``const``, ``var``, ``type``), recording
for each declared name the shape of the expression that defines it.
Function and method declarations are skipped.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from ...core.generator import SourceSyntaxError, UnrecognizedDeclarationError
from .naming import is_exported

GO_LANGUAGE = Language(tree_sitter_go.language())

_parser: Optional[Parser] = None


class DeclKind(Enum):
    """General declaration keywords."""

    IMPORT = "import"
    CONST = "const"
    VAR = "var"
    TYPE = "type"


class ExprShape(Enum):
    """Coarse shape of the expression defining a declared name."""

    SELECTOR = "selector"  # pkg.Name, x.Y.Z, (*T).Method
    IDENT = "ident"
    LITERAL = "literal"
    CALL = "call"
    COMPOSITE = "composite"
    STRUCT = "struct"
    INTERFACE = "interface"
    FUNC = "func"
    MAP = "map"
    CHAN = "chan"
    ARRAY = "array"
    POINTER = "pointer"
    OTHER = "other"


# Outermost node type -> shape. Types and expressions share the table.
_NODE_SHAPES = {
    "selector_expression": ExprShape.SELECTOR,
    "qualified_type": ExprShape.SELECTOR,
    "identifier": ExprShape.IDENT,
    "type_identifier": ExprShape.IDENT,
    "iota": ExprShape.IDENT,
    "true": ExprShape.IDENT,
    "false": ExprShape.IDENT,
    "nil": ExprShape.IDENT,
    "int_literal": ExprShape.LITERAL,
    "float_literal": ExprShape.LITERAL,
    "imaginary_literal": ExprShape.LITERAL,
    "rune_literal": ExprShape.LITERAL,
    "interpreted_string_literal": ExprShape.LITERAL,
    "raw_string_literal": ExprShape.LITERAL,
    "call_expression": ExprShape.CALL,
    "composite_literal": ExprShape.COMPOSITE,
    "struct_type": ExprShape.STRUCT,
    "interface_type": ExprShape.INTERFACE,
    "function_type": ExprShape.FUNC,
    "func_literal": ExprShape.FUNC,
    "map_type": ExprShape.MAP,
    "channel_type": ExprShape.CHAN,
    "array_type": ExprShape.ARRAY,
    "slice_type": ExprShape.ARRAY,
    "implicit_length_array_type": ExprShape.ARRAY,
    "pointer_type": ExprShape.POINTER,
}

_DECLARATION_KINDS = {
    "import_declaration": DeclKind.IMPORT,
    "const_declaration": DeclKind.CONST,
    "var_declaration": DeclKind.VAR,
    "type_declaration": DeclKind.TYPE,
}

_SPEC_TYPES = {
    DeclKind.IMPORT: ("import_spec",),
    DeclKind.CONST: ("const_spec",),
    DeclKind.VAR: ("var_spec",),
    DeclKind.TYPE: ("type_spec", "type_alias"),
}

# Top-level nodes that declare nothing forwardable.
_SKIPPED_NODES = frozenset({"comment", "function_declaration", "method_declaration"})


@dataclass(frozen=True)
class Declaration:
    """One name declared at the top level of a Go file."""

    name: str
    kind: DeclKind
    expr: Optional[ExprShape] = None
    expr_text: str = ""
    line: int = 0
    alias: bool = False

    @property
    def exported(self) -> bool:
        return is_exported(self.name)


@dataclass
class GoSource:
    """Package clause and top-level general declarations of a Go file."""

    package: str
    declarations: List[Declaration] = field(default_factory=list)


def get_parser() -> Parser:
    """Return the shared Go parser, creating it on first use."""
    global _parser
    if _parser is None:
        _parser = Parser(GO_LANGUAGE)
    return _parser


def parse_source(source: str, filename: str = "") -> GoSource:
    """
    Parse generated Go source into its top-level declarations.

    Args:
        source: Go source text
        filename: Name used in error messages

    Returns:
        Package name and declarations in source order

    Raises:
        SourceSyntaxError: If the text is not valid Go
        UnrecognizedDeclarationError: On a top-level node that is neither a
            general declaration nor a function
    """
    source_bytes = source.encode("utf-8")
    tree = get_parser().parse(source_bytes)
    return _Scanner(source_bytes, filename).scan(tree.root_node)


def classify_expression(node: Optional[Node]) -> Optional[ExprShape]:
    """Return the shape of an expression or type node, or None when absent."""
    if node is None:
        return None
    return _NODE_SHAPES.get(node.type, ExprShape.OTHER)


def _first_error(node: Node) -> Optional[Node]:
    """Depth-first search for the first ERROR or MISSING node."""
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


class _Scanner:
    """Walks the root node's children and collects declarations."""

    def __init__(self, source_bytes: bytes, filename: str):
        self.source_bytes = source_bytes
        self.filename = filename

    def text(self, node: Node) -> str:
        return self.source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def error(self, message: str, node: Node) -> SourceSyntaxError:
        row, column = node.start_point[0], node.start_point[1]
        return SourceSyntaxError(message, self.filename or None, row + 1, column + 1)

    def scan(self, root: Node) -> GoSource:
        if root.has_error:
            bad = _first_error(root) or root
            if bad.is_missing:
                raise self.error(f"missing {bad.type!r}", bad)
            snippet = self.text(bad).split("\n", 1)[0].strip()
            raise self.error(f"syntax error near {snippet!r}", bad)

        nodes = [n for n in root.named_children if n.type != "comment"]
        if not nodes or nodes[0].type != "package_clause":
            raise self.error("expected 'package' clause", nodes[0] if nodes else root)
        package = self.text(nodes[0].named_children[-1])

        source = GoSource(package=package)
        for node in nodes[1:]:
            if node.type in _SKIPPED_NODES:
                continue
            kind = _DECLARATION_KINDS.get(node.type)
            if kind is None:
                row, column = node.start_point[0] + 1, node.start_point[1] + 1
                raise UnrecognizedDeclarationError(
                    f"{self.filename or '<source>'}:{row}:{column}: "
                    f"no rule for top-level {node.type} {self.text(node)!r}",
                    path=self.filename or None,
                )
            source.declarations.extend(self.declarations(node, kind))
        return source

    def specs(self, node: Node, kind: DeclKind) -> Iterator[Node]:
        """Yield the specs of a declaration, looking inside grouped lists."""
        for child in node.named_children:
            if child.type in _SPEC_TYPES[kind]:
                yield child
            elif child.type.endswith("_spec_list"):
                yield from self.specs(child, kind)

    def declarations(self, node: Node, kind: DeclKind) -> Iterator[Declaration]:
        first = True
        for spec in self.specs(node, kind):
            if kind is DeclKind.IMPORT:
                yield self.import_declaration(spec)
            elif kind is DeclKind.TYPE:
                yield self.type_declaration(spec)
            else:
                yield from self.value_declarations(spec, kind, first)
            first = False

    def import_declaration(self, spec: Node) -> Declaration:
        path = spec.child_by_field_name("path")
        return Declaration(
            name=self.text(path).strip('"`'),
            kind=DeclKind.IMPORT,
            expr=ExprShape.LITERAL,
            expr_text=self.text(path),
            line=spec.start_point[0] + 1,
        )

    def type_declaration(self, spec: Node) -> Declaration:
        name = spec.child_by_field_name("name")
        type_node = spec.child_by_field_name("type")
        return Declaration(
            name=self.text(name),
            kind=DeclKind.TYPE,
            expr=classify_expression(type_node),
            expr_text=self.text(type_node) if type_node is not None else "",
            line=name.start_point[0] + 1,
            alias=spec.type == "type_alias",
        )

    def value_declarations(
        self, spec: Node, kind: DeclKind, first_in_group: bool
    ) -> Iterator[Declaration]:
        names = [n for n in spec.children_by_field_name("name") if n.type != ","]
        value_list = spec.child_by_field_name("value")
        values = (
            [v for v in value_list.named_children if v.type != "comment"]
            if value_list is not None
            else []
        )
        # The grammar allows "const x"; Go only allows it after a valued spec.
        if kind is DeclKind.CONST and not values and first_in_group:
            raise self.error("missing constant value", spec)

        for i, name in enumerate(names):
            value = values[i] if i < len(values) else None
            yield Declaration(
                name=self.text(name),
                kind=kind,
                expr=classify_expression(value),
                expr_text=self.text(value) if value is not None else "",
                line=name.start_point[0] + 1,
            )
