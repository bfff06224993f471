import os
import json
import pytest

from tscodemap.parsing import TypeScriptProgram
from tscodemap.parsing.source_file import parse_source

SAMPLE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "fixtures", "sample_project"))

DEFAULT_TSCONFIG = {"compilerOptions": {"strict": True}, "include": ["src/**/*"]}


@pytest.fixture
def make_project(tmp_path):
    """Write a throwaway project; ``tsconfig=None`` leaves tsconfig.json out."""

    def _make(files, tsconfig=DEFAULT_TSCONFIG, package_json=True):
        if package_json:
            (tmp_path / "package.json").write_text(json.dumps({"name": tmp_path.name}))
        if tsconfig is not None:
            (tmp_path / "tsconfig.json").write_text(json.dumps(tsconfig))
        for rel_path, content in files.items():
            target = tmp_path / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return tmp_path

    return _make


@pytest.fixture(scope="session")
def sample_program():
    return TypeScriptProgram(SAMPLE_DIR)


@pytest.fixture
def parse():
    def _parse(code, file_name="snippet.ts"):
        return parse_source(file_name, code.encode("utf-8"))

    return _parse
