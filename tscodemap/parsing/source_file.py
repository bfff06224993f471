import chardet
import tree_sitter_typescript
from dataclasses import dataclass
from tree_sitter import Language, Parser, Node, Tree

TS_LANGUAGE = Language(tree_sitter_typescript.language_typescript())
TSX_LANGUAGE = Language(tree_sitter_typescript.language_tsx())


def read_source_bytes(file_path: str) -> bytes:
    """Read a file as UTF-8 bytes, transcoding other encodings first."""
    with open(file_path, "rb") as f:
        raw = f.read()
    try:
        raw.decode("utf-8")
        return raw
    except UnicodeDecodeError:
        guess = chardet.detect(raw)
        encoding = guess["encoding"] or "utf-8"
        return raw.decode(encoding, errors="replace").encode("utf-8")


def node_text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace") if node.text is not None else ""


@dataclass(frozen=True)
class ParsedFile:
    path: str
    source: bytes
    tree: Tree

    @property
    def root_node(self) -> Node:
        return self.tree.root_node

    def get_text(self, node: Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def parse_source(file_path: str, source: bytes) -> ParsedFile:
    language = TSX_LANGUAGE if file_path.endswith(".tsx") else TS_LANGUAGE
    tree = Parser(language).parse(source)
    return ParsedFile(path=file_path, source=source, tree=tree)
