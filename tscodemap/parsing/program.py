import os
import pathspec
from typing import Dict, List, Optional
from tree_sitter import Node

from tscodemap.config import (
    DEFAULT_EXCLUDE,
    DEFAULT_INCLUDE,
    TS_EXTENSIONS,
    TSCONFIG_FILENAME,
    load_tsconfig,
)
from tscodemap.errors import ConfigurationError
from tscodemap.logger import ApplicationLogger, log_error
from tscodemap.parsing.printer import get_doc_comment, print_node
from tscodemap.parsing.source_file import ParsedFile, parse_source, read_source_bytes
from tscodemap.parsing.type_resolver import TypeResolver


def _posix_relpath(path: str, start: str) -> str:
    return os.path.normpath(os.path.relpath(path, start)).replace("\\", "/")


def _anchored(patterns: List[str]) -> List[str]:
    # tsconfig globs are relative to the config directory, not to any depth
    return ["/" + p.lstrip("/") for p in patterns]


class TypeScriptProgram:
    """Parsed trees and type display strings for the files of one tsconfig.

    The root file set is fixed when the program is created; trees are parsed
    on first request and cached by absolute path.
    """

    def __init__(self, root_dir: str, tsconfig_path: Optional[str] = None):
        self.root_dir = os.path.abspath(root_dir)
        config_path = tsconfig_path or os.path.join(self.root_dir, TSCONFIG_FILENAME)
        try:
            self.config = load_tsconfig(config_path)
        except ConfigurationError as e:
            log_error(e, "initialize_typescript_program", {"tsconfig": config_path})
            raise
        self.type_resolver = TypeResolver(strict_null_checks=self.config.strict_null_checks)
        self.logger = ApplicationLogger()
        self._root_file_names = self._collect_root_file_names()
        self._root_file_set = set(self._root_file_names)
        self._source_files: Dict[str, ParsedFile] = {}

    def _exclude_patterns(self) -> List[str]:
        if self.config.exclude is not None:
            return list(self.config.exclude)
        patterns = list(DEFAULT_EXCLUDE)
        out_dir = self.config.out_dir
        if out_dir and out_dir.startswith(self.config.spec_dir):
            patterns.append(_posix_relpath(out_dir, self.config.spec_dir) + "/")
        return patterns

    def _collect_root_file_names(self) -> List[str]:
        spec_dir = self.config.spec_dir
        names = []
        for name in self.config.files or []:
            candidate = os.path.normpath(os.path.join(spec_dir, name))
            if os.path.isfile(candidate):
                names.append(candidate)

        if self.config.files is not None and self.config.include is None:
            return names

        include = self.config.include if self.config.include is not None else DEFAULT_INCLUDE
        include_spec = pathspec.GitIgnoreSpec.from_lines(_anchored(include))
        exclude_spec = pathspec.GitIgnoreSpec.from_lines(_anchored(self._exclude_patterns()))

        for dirpath, dirnames, filenames in os.walk(spec_dir):
            rel_dir = _posix_relpath(dirpath, spec_dir)
            kept = []
            for d in sorted(dirnames):
                rel = d if rel_dir == "." else f"{rel_dir}/{d}"
                if d.startswith(".") or exclude_spec.match_file(rel + "/"):
                    continue
                kept.append(d)
            dirnames[:] = kept

            for fn in sorted(filenames):
                if not fn.endswith(TS_EXTENSIONS):
                    continue
                rel = fn if rel_dir == "." else f"{rel_dir}/{fn}"
                if include_spec.match_file(rel) and not exclude_spec.match_file(rel):
                    full_path = os.path.join(dirpath, fn)
                    if full_path not in names:
                        names.append(full_path)
        return names

    def get_root_file_names(self) -> Optional[List[str]]:
        return list(self._root_file_names)

    def get_source_file(self, file_path: str) -> Optional[ParsedFile]:
        full_path = os.path.normpath(os.path.join(self.root_dir, file_path))
        if full_path not in self._root_file_set:
            return None
        parsed = self._source_files.get(full_path)
        if parsed is None:
            self.logger.debug({"method": "get_source_file"}, f"Parsing {full_path}")
            parsed = parse_source(full_path, read_source_bytes(full_path))
            self._source_files[full_path] = parsed
        return parsed

    def resolve_type(self, node: Node) -> Optional[str]:
        return self.type_resolver.resolve_type(node)

    def print_node(
        self,
        node: Node,
        parsed_file: ParsedFile,
        remove_comments: bool = True,
        start_byte: Optional[int] = None,
        end_byte: Optional[int] = None,
    ) -> str:
        return print_node(node, parsed_file, remove_comments, start_byte, end_byte)

    def get_doc_comment(self, node: Node, parsed_file: ParsedFile) -> str:
        return get_doc_comment(node, parsed_file)
