from typing import List
from tree_sitter import Node

from tscodemap.parsing import ParsedFile, TypeScriptProgram


def _statement_end(node: Node) -> int:
    """End of the last real token, before trailing comments and inserted semicolons."""
    for child in reversed(node.children):
        if child.type == "comment" or child.start_byte == child.end_byte:
            continue
        return child.end_byte
    return node.end_byte


def build_dependency_graph(parsed_file: ParsedFile, program: TypeScriptProgram) -> List[str]:
    """Top-level import statements of a file as source text, in order.

    Comments inside a statement are kept and every statement ends in ``;``,
    placed ahead of any trailing comment. Duplicates are kept.
    """
    dependencies = []
    for node in parsed_file.root_node.named_children:
        if node.type != "import_statement":
            continue
        cut = _statement_end(node)
        text = program.print_node(node, parsed_file, remove_comments=False, end_byte=cut).rstrip()
        if not text.endswith(";"):
            text += ";"
        trailing = program.print_node(node, parsed_file, remove_comments=False, start_byte=cut)
        dependencies.append((text + trailing).strip())
    return dependencies
