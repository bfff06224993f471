import os
import json
import pytest

from tscodemap import (
    CodebaseMap,
    ConfigurationError,
    MissingSourceFileError,
    TypeScriptCodeMapper,
)

HERE = os.path.dirname(__file__)
SAMPLE_DIR = os.path.abspath(os.path.join(HERE, "fixtures", "sample_project"))


@pytest.fixture(scope="module")
def mapper():
    m = TypeScriptCodeMapper(root_dir=SAMPLE_DIR, project_name="sample_project")
    result = m.build_codebase_map_sync()
    assert result.is_ok()
    return m


@pytest.fixture(scope="module")
def modules(mapper):
    return mapper.get_codebase_map()["sample_project"].modules


def _by_name(items):
    return {item.name: item for item in items}


def test_single_project_keyed_by_name(mapper):
    codebase_map = mapper.get_codebase_map()
    assert isinstance(codebase_map, CodebaseMap)
    assert list(codebase_map) == ["sample_project"]


def test_modules_are_discovered_sources(modules):
    # .d.ts and .spec.ts files are never mapped
    assert set(modules) == {
        "src/index.ts",
        "src/logger.ts",
        "src/types.ts",
        "src/utils/format.ts",
    }
    for path, module in modules.items():
        assert module.path == path


def test_logger_class_members(modules):
    logger_module = modules["src/logger.ts"]
    assert [c.name for c in logger_module.classes] == ["Logger"]
    logger = logger_module.classes[0]

    # constructor excluded, getter and setter both kept
    assert [f.name for f in logger.functions] == ["log", "level", "level"]
    assert [p.to_dict() for p in logger.properties] == [
        {"name": "logLevel", "type": "LogLevel"},
        {"name": "count", "type": "number"},
    ]
    assert logger.interfaces == []
    assert logger.enums == []
    assert logger_module.functions == []


def test_method_details(modules):
    log = modules["src/logger.ts"].classes[0].functions[0]
    assert log.to_dict() == {
        "name": "log",
        "content": "log(message: string): void {\n  console.log(message);\n}",
        "parameters": [{"name": "message", "type": "string"}],
        "returnType": "void",
        "comments": "Writes a message to the console.",
    }


def test_accessor_details(modules):
    getter, setter = modules["src/logger.ts"].classes[0].functions[1:]
    assert getter.parameters == []
    assert getter.return_type == "LogLevel"
    assert [p.to_dict() for p in setter.parameters] == [{"name": "value", "type": "LogLevel"}]
    assert setter.return_type == "void"


def test_dependencies_in_source_order(modules):
    assert modules["src/logger.ts"].dependencies == ["import { LogLevel } from './types';"]
    assert modules["src/index.ts"].dependencies == [
        "import { Logger } from './logger';",
        "import { formatRecord } from '@utils/format';",
        "import * as path from 'path';",
        "import { LogLevel } from './types';",
    ]


def test_top_level_functions(modules):
    index_fns = _by_name(modules["src/index.ts"].functions)
    assert list(index_fns) == ["main"]
    assert index_fns["main"].return_type == "void"

    # arrow functions in variables and the anonymous default export are skipped
    format_fns = modules["src/utils/format.ts"].functions
    assert [f.name for f in format_fns] == ["formatRecord"]
    format_record = format_fns[0]
    assert format_record.return_type == "any"
    assert [p.to_dict() for p in format_record.parameters] == [
        {"name": "record", "type": "LogRecord"},
        {"name": "extra", "type": "string[]"},
    ]


def test_interface_and_enum(modules):
    types_module = modules["src/types.ts"]
    assert types_module.classes == []

    (record,) = types_module.interfaces
    assert record.name == "LogRecord"
    assert record.summary == "Shape of a single log record."
    # method signatures are not properties, untyped properties are any
    assert [p.to_dict() for p in record.properties] == [
        {"name": "message", "type": "string"},
        {"name": "level", "type": "LogLevel"},
        {"name": "context", "type": "any"},
    ]

    (level,) = types_module.enums
    assert level.name == "LogLevel"
    assert [m.to_dict() for m in level.members] == [
        {"name": "Debug", "value": "'debug'"},
        {"name": "Info", "value": "'info'"},
        {"name": "Silent"},
    ]


def test_rebuild_is_identical(mapper):
    first = mapper.get_codebase_map().to_dict()
    second = TypeScriptCodeMapper(root_dir=SAMPLE_DIR, project_name="sample_project")
    assert second.build_codebase_map_sync().get_value().to_dict() == first


def test_write_to_file(mapper, tmp_path):
    out = tmp_path / "out" / "codebase_map.json"
    mapper.write_to_file(str(out))
    with open(out, encoding="utf-8") as f:
        data = json.load(f)
    assert data == mapper.get_codebase_map().to_dict()
    logger = data["sample_project"]["modules"]["src/logger.ts"]["classes"][0]
    assert logger["functions"][0]["returnType"] == "void"


def test_write_before_build_fails(tmp_path):
    m = TypeScriptCodeMapper(root_dir=SAMPLE_DIR)
    with pytest.raises(RuntimeError):
        m.write_to_file(str(tmp_path / "map.json"))


def test_missing_tsconfig(make_project):
    root = make_project({"src/a.ts": "export const a = 1;\n"}, tsconfig=None)
    with pytest.raises(ConfigurationError):
        TypeScriptCodeMapper(root_dir=str(root))


def test_file_outside_program_aborts(make_project):
    root = make_project({
        "src/a.ts": "export function a(): number { return 1; }\n",
        "scripts/build.ts": "export function build(): void {}\n",
    })
    m = TypeScriptCodeMapper(root_dir=str(root))
    with pytest.raises(MissingSourceFileError) as excinfo:
        m.build_codebase_map_sync()
    assert excinfo.value.file_path == "scripts/build.ts"
    assert m.get_codebase_map() is None


def test_empty_file_gives_empty_module(make_project):
    root = make_project({"src/empty.ts": ""})
    codebase_map = TypeScriptCodeMapper(root_dir=str(root), project_name="p").build_codebase_map_sync().get_value()
    assert codebase_map.to_dict() == {
        "p": {
            "modules": {
                "src/empty.ts": {
                    "path": "src/empty.ts",
                    "classes": [],
                    "functions": [],
                    "interfaces": [],
                    "enums": [],
                    "dependencies": [],
                }
            }
        }
    }


def test_defaults_from_working_directory(make_project, monkeypatch):
    root = make_project({"src/a.ts": "export function a(): void {}\n"})
    monkeypatch.chdir(root / "src")
    m = TypeScriptCodeMapper()
    assert os.path.realpath(m.root_dir) == os.path.realpath(str(root))
    assert m.project_name == "src"
    modules = m.build_codebase_map_sync().get_value()["src"].modules
    assert list(modules) == ["src/a.ts"]


@pytest.mark.parametrize(
    "strict, expected",
    [(True, "null"), (False, "any")],
)
def test_null_initializer_depends_on_strictness(make_project, strict, expected):
    root = make_project(
        {"src/a.ts": "export class A {\n  value = null;\n}\n"},
        tsconfig={"compilerOptions": {"strict": strict}},
    )
    modules = TypeScriptCodeMapper(root_dir=str(root), project_name="p").build_codebase_map_sync().get_value()["p"].modules
    assert modules["src/a.ts"].classes[0].properties[0].type == expected


def test_inferred_property_types(make_project):
    source = (
        "class Store {\n"
        "  names = ['a', 'b'];\n"
        "  mixed = [1, 'a'];\n"
        "  cache = new Map<string, number>();\n"
        "  options = { retries: 3, label: 'x' };\n"
        "  ready = !0;\n"
        "  label = 'n' + 1;\n"
        "}\n"
    )
    root = make_project({"src/store.ts": source})
    modules = TypeScriptCodeMapper(root_dir=str(root), project_name="p").build_codebase_map_sync().get_value()["p"].modules
    types = {p.name: p.type for p in modules["src/store.ts"].classes[0].properties}
    assert types == {
        "names": "string[]",
        "mixed": "(number | string)[]",
        "cache": "Map<string, number>",
        "options": "{ retries: number; label: string; }",
        "ready": "boolean",
        "label": "string",
    }


def test_dot_relative_tsconfig_globs(make_project):
    root = make_project(
        {
            "src/a.ts": "export function a(): number { return 1; }\n",
            "src/extra/b.ts": "export function b(): void {}\n",
            "node_modules/lib/index.ts": "export const lib = 1;\n",
        },
        tsconfig={"include": ["./src/**/*", "./node_modules/**/*"], "exclude": ["./node_modules"]},
    )
    m = TypeScriptCodeMapper(root_dir=str(root), project_name="p")
    root_files = {os.path.relpath(f, str(root)).replace(os.sep, "/") for f in m.program.get_root_file_names()}
    assert root_files == {"src/a.ts", "src/extra/b.ts"}

    modules = m.build_codebase_map_sync().get_value()["p"].modules
    assert list(modules) == ["src/a.ts", "src/extra/b.ts"]
    assert modules["src/a.ts"].functions[0].name == "a"


def test_globs_are_relative_to_config_dir(make_project):
    # "lib" only names the top-level directory, not src/lib
    root = make_project(
        {"lib/a.ts": "export {};\n", "src/lib/b.ts": "export {};\n"},
        tsconfig={"include": ["lib"]},
    )
    m = TypeScriptCodeMapper(root_dir=str(root))
    assert [os.path.relpath(f, str(root)).replace(os.sep, "/") for f in m.program.get_root_file_names()] == ["lib/a.ts"]
