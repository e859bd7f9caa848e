# Source Model: an immutable Node tree plus token stream built from a tree-sitter parse.
# Rules only ever see these objects, never tree-sitter nodes, so the tree they
# read cannot change under them and carries 1-based character columns.

import bisect
import logging
from functools import cached_property
from pathlib import Path
from typing import Iterator, Optional, Union

from tree_sitter import Node as TSNode
from tree_sitter import Parser, Tree

from lintkit.errors import ParseError
from lintkit.findings.models import Span
from lintkit.parser import check_syntax, create_parser, parse_bytes
from lintkit.scope import ScopeAnalysis

logger = logging.getLogger(__name__)


class Node:
    """
    One syntax node: kind, span, ordered children and a parent back-reference.

    `kind` is the grammar's node type (e.g. "variable_declaration"), `named`
    is False for anonymous tokens such as "var" or ";", and `field` is the
    grammar field this node fills in its parent (e.g. "condition").
    """

    __slots__ = ("_kind", "_span", "_named", "_field", "_parent", "_children")

    def __init__(
        self,
        kind: str,
        span: Span,
        named: bool = True,
        field: Optional[str] = None,
        parent: Optional["Node"] = None,
    ) -> None:
        self._kind = kind
        self._span = span
        self._named = named
        self._field = field
        self._parent = parent
        self._children: Union[list, tuple] = []

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def span(self) -> Span:
        return self._span

    @property
    def named(self) -> bool:
        return self._named

    @property
    def field(self) -> Optional[str]:
        return self._field

    @property
    def parent(self) -> Optional["Node"]:
        return self._parent

    @property
    def children(self) -> tuple:
        return tuple(self._children)

    @property
    def named_children(self) -> list["Node"]:
        return [c for c in self._children if c.named and c.kind != "comment"]

    def child_by_field(self, name: str) -> Optional["Node"]:
        for child in self._children:
            if child.field == name:
                return child
        return None

    def child_of_kind(self, kind: str) -> Optional["Node"]:
        for child in self._children:
            if child.kind == kind:
                return child
        return None

    def ancestors(self) -> Iterator["Node"]:
        node = self._parent
        while node is not None:
            yield node
            node = node._parent

    def walk(self) -> Iterator["Node"]:
        """Yield this node and every descendant in document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def _seal(self) -> None:
        self._children = tuple(self._children)

    def __repr__(self) -> str:
        return f"Node({self._kind!r}, {self._span.start}..{self._span.end})"


class _LineIndex:
    """Maps byte offsets to 1-based (line, character column)."""

    def __init__(self, source: bytes) -> None:
        self._source = source
        self._starts = [0]
        pos = source.find(b"\n")
        while pos != -1:
            self._starts.append(pos + 1)
            pos = source.find(b"\n", pos + 1)

    def position(self, offset: int) -> tuple[int, int]:
        row = bisect.bisect_right(self._starts, offset) - 1
        start = self._starts[row]
        column = len(self._source[start:offset].decode("utf-8", errors="replace"))
        return row + 1, column + 1

    def span(self, start: int, end: int) -> Span:
        line, column = self.position(start)
        end_line, end_column = self.position(end)
        return Span(
            start=start,
            end=end,
            line=line,
            column=column,
            end_line=end_line,
            end_column=end_column,
        )


class SourceModel:
    """
    Per-file, read-only input to the traversal engine.

    Holds the path, raw source bytes, decoded text, the root Node and the
    token stream (leaf nodes in document order, comments included).
    """

    def __init__(self, path: Path, source: bytes, root: Node) -> None:
        self.path = path
        self.source = source
        self.text = source.decode("utf-8")
        self.root = root
        self.tokens: tuple[Node, ...] = tuple(n for n in root.walk() if not n.children)
        self._token_starts = [t.span.start for t in self.tokens]
        self._index = _LineIndex(source)

    @cached_property
    def scopes(self) -> ScopeAnalysis:
        """Declarations and references, computed on first use."""
        return ScopeAnalysis(self)

    @property
    def comments(self) -> list[Node]:
        return [t for t in self.tokens if t.kind == "comment"]

    @property
    def node_count(self) -> int:
        return sum(1 for _ in self.root.walk())

    def text_of(self, target: Union[Node, Span]) -> str:
        span = target.span if isinstance(target, Node) else target
        return self.source[span.start : span.end].decode("utf-8", errors="replace")

    def span_between(self, start: int, end: int) -> Span:
        return self._index.span(start, end)

    def tokens_between(self, start: int, end: int) -> list[Node]:
        """Tokens lying entirely inside [start, end)."""
        i = bisect.bisect_left(self._token_starts, start)
        found = []
        while i < len(self.tokens) and self.tokens[i].span.end <= end:
            if self.tokens[i].span.start >= start:
                found.append(self.tokens[i])
            i += 1
        return found


def build_source_model(tree: Tree, source: bytes, path: Path) -> SourceModel:
    """
    Convert a tree-sitter tree into the engine's own Node tree.

    Walks with a TreeCursor (no recursion) so deeply nested input cannot hit
    the interpreter's recursion limit.
    """
    index = _LineIndex(source)
    cursor = tree.walk()
    stack: list[Node] = []
    root: Optional[Node] = None
    while True:
        ts_node: TSNode = cursor.node
        parent = stack[-1] if stack else None
        node = Node(
            kind=ts_node.type,
            span=index.span(ts_node.start_byte, ts_node.end_byte),
            named=ts_node.is_named,
            field=cursor.field_name,
            parent=parent,
        )
        if parent is None:
            root = node
        else:
            parent._children.append(node)

        if cursor.goto_first_child():
            stack.append(node)
            continue
        node._seal()
        while not cursor.goto_next_sibling():
            if not cursor.goto_parent():
                assert root is not None
                return SourceModel(path=path, source=source, root=root)
            stack.pop()._seal()


def create_context(
    path: Path,
    source: Optional[bytes] = None,
    parser: Optional[Parser] = None,
) -> SourceModel:
    """
    Read (unless source is given) and parse a JavaScript file into a SourceModel.

    Raises ParseError when the file cannot be read, is not valid UTF-8, or has
    syntax errors; the caller turns that into a single fatal finding.
    """
    if source is None:
        try:
            source = path.read_bytes()
        except OSError as e:
            logger.error("Failed to read file %s: %s", path, e)
            raise ParseError(f"Cannot read file: {e.strerror or e}") from e
    try:
        source.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError("Parsing error: file is not valid UTF-8", offset=e.start) from e

    if parser is None:
        parser = create_parser()
    tree = parse_bytes(source, parser=parser)
    check_syntax(tree, source)

    model = build_source_model(tree, source, path)
    logger.info("Parsed %s: %d nodes, %d tokens", path, model.node_count, len(model.tokens))
    return model
