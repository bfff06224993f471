import os
import asyncio
import pathspec
from pathlib import Path
from typing import List, Optional

from tscodemap.config import PROJECT_MANIFEST, TS_EXTENSIONS

EXCLUDED_NAME_SUFFIXES = (".d", ".spec", ".test", ".mock")
IGNORED_DIRS = {"node_modules", "dist"}


def find_project_root(current_dir: Optional[str] = None) -> str:
    """Nearest ancestor holding a package.json, else the working directory.

    The filesystem root itself is never checked.
    """
    current_dir = os.path.abspath(current_dir or os.getcwd())
    while current_dir != os.path.dirname(current_dir):
        if os.path.isfile(os.path.join(current_dir, PROJECT_MANIFEST)):
            return current_dir
        current_dir = os.path.dirname(current_dir)
    return os.getcwd()


def is_source_file(file_name: str) -> bool:
    for ext in TS_EXTENSIONS:
        if file_name.endswith(ext):
            stem = file_name[: -len(ext)]
            return bool(stem) and not stem.endswith(EXCLUDED_NAME_SUFFIXES)
    return False


def _gitignore_spec(root_dir: Path) -> pathspec.GitIgnoreSpec:
    gitignore_pth = root_dir / ".gitignore"
    patterns = gitignore_pth.read_text(encoding="utf-8").splitlines() if gitignore_pth.exists() else []
    return pathspec.GitIgnoreSpec.from_lines(patterns)


def scan_source_files(root_dir: str) -> List[str]:
    """Sorted root-relative POSIX paths of the TypeScript sources under ``root_dir``."""
    root = Path(root_dir)
    spec = _gitignore_spec(root)
    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else rel_dir + "/"
        dirnames[:] = sorted(
            d for d in dirnames
            if d not in IGNORED_DIRS
            and not d.startswith(".")
            and not spec.match_file(prefix + d + "/")
        )
        for fn in filenames:
            if fn.startswith(".") or not is_source_file(fn):
                continue
            rel_path = prefix + fn
            if not spec.match_file(rel_path):
                found.append(rel_path)
    return sorted(found)


async def get_source_files(root_dir: str) -> List[str]:
    return await asyncio.to_thread(scan_source_files, root_dir)
