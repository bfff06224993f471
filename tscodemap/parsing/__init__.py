from tscodemap.parsing.program import TypeScriptProgram
from tscodemap.parsing.source_file import ParsedFile, node_text

__all__ = ["TypeScriptProgram", "ParsedFile", "node_text"]
