from typing import List, Optional, Tuple
from tree_sitter import Node

from tscodemap.parsing.source_file import ParsedFile

# `export ...` / `declare ...` statements carry the JSDoc and modifiers of the declaration they wrap.
DOC_WRAPPER_TYPES = {"export_statement", "ambient_declaration"}


def _subtree_ranges(node: Node, node_type: str) -> List[Tuple[int, int]]:
    ranges = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == node_type:
            ranges.append((current.start_byte, current.end_byte))
            continue
        stack.extend(current.children)
    return sorted(ranges)


def _inside(offset: int, ranges: List[Tuple[int, int]]) -> bool:
    return any(start < offset < end for start, end in ranges)


def _cut_comments(source: bytes, start: int, end: int, comments: List[Tuple[int, int]]) -> Tuple[bytes, bool]:
    pieces = []
    cursor = start
    cut = False
    for c_start, c_end in comments:
        if c_end <= start or c_start >= end:
            continue
        pieces.append(source[cursor:max(c_start, start)])
        cursor = min(c_end, end)
        cut = True
    pieces.append(source[cursor:end])
    return b"".join(pieces), cut


def _dedent(line: str, width: int) -> str:
    stripped = line.lstrip(" \t")
    removable = len(line) - len(stripped)
    return line[min(removable, width):]


def print_node(
    node: Node,
    parsed_file: ParsedFile,
    remove_comments: bool = True,
    start_byte: Optional[int] = None,
    end_byte: Optional[int] = None,
) -> str:
    """Render a node, or the ``[start_byte, end_byte)`` slice of it, back to source text.

    Continuation lines are dedented by the node's starting column. With
    ``remove_comments`` every comment in the subtree is dropped, and so is
    any line left blank by that. Lines inside template literals are kept
    as written.
    """
    source = parsed_file.source
    start = node.start_byte if start_byte is None else start_byte
    end = node.end_byte if end_byte is None else end_byte
    comments = _subtree_ranges(node, "comment") if remove_comments else []
    templates = _subtree_ranges(node, "template_string")
    indent = node.start_point[1]

    lines = []
    line_start = start
    while True:
        newline = source.find(b"\n", line_start, end)
        line_end = end if newline == -1 else newline
        raw, cut = _cut_comments(source, line_start, line_end, comments)
        line = raw.decode("utf-8", errors="replace")

        if _inside(line_start, templates):
            lines.append(line)
        else:
            if not _inside(line_end, templates):
                line = line.rstrip()
            if not (cut and not line.strip()):
                lines.append(line if line_start == start else _dedent(line, indent))

        if newline == -1:
            break
        line_start = newline + 1
    return "\n".join(lines)


def _jsdoc_description(comment: str) -> str:
    body = comment[3:-2] if comment.endswith("*/") else comment[3:]
    lines = []
    for line in body.split("\n"):
        line = line.strip()
        if line.startswith("*"):
            line = line[1:]
            if line.startswith(" "):
                line = line[1:]
        if line.lstrip().startswith("@"):
            break
        lines.append(line.rstrip())
    return "\n".join(lines).strip()


def outer_declaration(node: Node) -> Node:
    """The outermost ``export`` / ``declare`` statement wrapping ``node``, else ``node``."""
    while node.parent is not None and node.parent.type in DOC_WRAPPER_TYPES:
        node = node.parent
    return node


def get_doc_comment(node: Node, parsed_file: ParsedFile) -> str:
    """Join the descriptions of all JSDoc blocks attached to ``node``."""
    anchor = outer_declaration(node)

    docs = []
    sibling = anchor.prev_sibling
    while sibling is not None and sibling.type in ("comment", "decorator"):
        if sibling.type == "comment":
            text = parsed_file.get_text(sibling)
            if text.startswith("/**") and not text.startswith("/**/"):
                docs.append(_jsdoc_description(text))
        sibling = sibling.prev_sibling
    docs.reverse()
    return "\n".join(docs)
