# Tree-sitter setup and JavaScript parsing: parse source into tree-sitter trees.

import logging
from typing import Iterator, Optional

import tree_sitter
from tree_sitter import Language
from tree_sitter import Node as TSNode
from tree_sitter_javascript import language as _js_language_capsule

from lintkit.errors import ParseError

logger = logging.getLogger(__name__)

# JavaScript (with JSX) grammar: wrap tree-sitter-javascript capsule for tree_sitter.Parser
_JS_LANGUAGE = Language(_js_language_capsule())


def create_parser() -> tree_sitter.Parser:
    """Create and return a Tree-sitter Parser configured for JavaScript."""
    return tree_sitter.Parser(_JS_LANGUAGE)


def parse_bytes(
    source: bytes,
    parser: Optional[tree_sitter.Parser] = None,
) -> tree_sitter.Tree:
    """
    Parse JavaScript source bytes into a tree-sitter tree.

    Tree-sitter always produces a tree; syntax problems show up as ERROR or
    MISSING nodes (root_node.has_error). Use check_syntax() to reject those.
    """
    if parser is None:
        parser = create_parser()
    tree = parser.parse(source)
    if tree.root_node.has_error:
        logger.warning("Parse completed with errors: root=%s", tree.root_node.type)
    else:
        logger.debug("Parse succeeded: root=%s", tree.root_node.type)
    return tree


def _iter_problem_nodes(root: TSNode) -> Iterator[TSNode]:
    stack = [root]
    while stack:
        node = stack.pop()
        if not node.has_error and not node.is_missing:
            continue
        if node.is_error or node.is_missing:
            yield node
            continue
        stack.extend(reversed(node.children))


def first_syntax_error(tree: tree_sitter.Tree) -> Optional[TSNode]:
    """Return the first ERROR or MISSING node in document order, if any."""
    if not tree.root_node.has_error:
        return None
    problems = list(_iter_problem_nodes(tree.root_node))
    if not problems:
        return tree.root_node
    return min(problems, key=lambda n: n.start_byte)


def check_syntax(tree: tree_sitter.Tree, source: bytes) -> None:
    """
    Raise ParseError if the tree contains syntax errors.

    tree-sitter recovers from anything, but rules assume a well-formed tree, so
    a file with ERROR or MISSING nodes is not linted at all.
    """
    node = first_syntax_error(tree)
    if node is None:
        return
    row, _ = node.start_point
    line_start = source.rfind(b"\n", 0, node.start_byte) + 1
    column = len(source[line_start : node.start_byte].decode("utf-8", errors="replace")) + 1
    if node.is_missing:
        message = f"Parsing error: missing '{node.type}'"
    else:
        snippet = source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")
        token = snippet.strip().split(None, 1)[0] if snippet.strip() else ""
        message = f"Parsing error: unexpected token '{token}'" if token else "Parsing error: unexpected end of input"
    raise ParseError(message, line=row + 1, column=column, offset=node.start_byte)
