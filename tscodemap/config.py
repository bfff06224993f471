import os
import re
import json
import posixpath
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from tscodemap.errors import ConfigurationError

TSCONFIG_FILENAME = "tsconfig.json"
PROJECT_MANIFEST = "package.json"

TS_EXTENSIONS = (".ts", ".tsx")
DEFAULT_INCLUDE = ["**/*"]
DEFAULT_EXCLUDE = ["node_modules", "bower_components", "jspm_packages"]

_STRING_OR_COMMENT = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*[\s\S]*?\*/')
_STRING_OR_TRAILING_COMMA = re.compile(r'("(?:\\.|[^"\\])*")|,(\s*[}\]])')


def normalize_spec(entry: str) -> str:
    """``./src//**/*`` -> ``src/**/*``; a bare ``.`` means every file."""
    entry = posixpath.normpath(entry.replace("\\", "/"))
    if entry == ".":
        return "**/*"
    return entry


def _strip_json_comments(text: str) -> str:
    return _STRING_OR_COMMENT.sub(lambda m: m.group(1) or "", text)


def _strip_trailing_commas(text: str) -> str:
    return _STRING_OR_TRAILING_COMMA.sub(lambda m: m.group(1) or m.group(2), text)


@dataclass
class TsConfig:
    path: str
    compiler_options: Dict[str, Any] = field(default_factory=dict)
    files: Optional[List[str]] = None
    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None
    spec_dir: str = ""
    base_url: Optional[str] = None

    @property
    def config_dir(self) -> str:
        return os.path.dirname(self.path)

    @property
    def paths(self) -> Dict[str, List[str]]:
        paths = self.compiler_options.get("paths", {})
        if isinstance(paths, dict):
            return paths
        return {}

    @property
    def paths_base(self) -> str:
        return self.base_url or self.config_dir

    @property
    def strict_null_checks(self) -> bool:
        opts = self.compiler_options
        if "strictNullChecks" in opts:
            return bool(opts["strictNullChecks"])
        return bool(opts.get("strict", False))

    @property
    def out_dir(self) -> Optional[str]:
        out_dir = self.compiler_options.get("outDir")
        if not out_dir:
            return None
        return os.path.normpath(os.path.join(self.config_dir, out_dir))


def _read_config_json(config_file_path: str) -> Dict[str, Any]:
    if not os.path.isfile(config_file_path):
        raise ConfigurationError(f"tsconfig not found at {config_file_path}")
    try:
        with open(config_file_path, "r", encoding="utf-8") as f:
            raw = f.read()
    except OSError as e:
        raise ConfigurationError(f"Unable to read {config_file_path}: {e}") from e

    clean = _strip_trailing_commas(_strip_json_comments(raw)).strip()
    if not clean:
        return {}
    try:
        cfg = json.loads(clean)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {config_file_path}: {e}") from e
    if not isinstance(cfg, dict):
        raise ConfigurationError(f"{config_file_path} must contain a JSON object")
    return cfg


def _resolve_extends(extends: str, config_dir: str) -> str:
    if extends.startswith("."):
        candidate = os.path.normpath(os.path.join(config_dir, extends))
    else:
        candidate = os.path.join(config_dir, "node_modules", extends)
        if os.path.isdir(candidate):
            candidate = os.path.join(candidate, TSCONFIG_FILENAME)
    if not os.path.isfile(candidate) and not candidate.endswith(".json"):
        candidate += ".json"
    return candidate


def load_tsconfig(config_file_path: str, _seen=None) -> TsConfig:
    """Read a tsconfig.json, following ``extends`` chains.

    Options of the extending file win over the base; ``files``, ``include``
    and ``exclude`` are inherited only when the extending file omits them.
    """
    config_file_path = os.path.abspath(config_file_path)
    seen = set(_seen or ())
    if config_file_path in seen:
        raise ConfigurationError(f"Circular extends chain at {config_file_path}")
    seen.add(config_file_path)

    cfg = _read_config_json(config_file_path)
    config_dir = os.path.dirname(config_file_path)

    extends = cfg.get("extends")
    bases = [extends] if isinstance(extends, str) else list(extends or [])
    merged = TsConfig(path=config_file_path, spec_dir=config_dir)
    for base in bases:
        parent = load_tsconfig(_resolve_extends(base, config_dir), seen)
        merged.compiler_options.update(parent.compiler_options)
        for attr in ("files", "include", "exclude"):
            if getattr(parent, attr) is not None:
                setattr(merged, attr, getattr(parent, attr))
                merged.spec_dir = parent.spec_dir
        if parent.base_url:
            merged.base_url = parent.base_url

    options = cfg.get("compilerOptions") or {}
    if not isinstance(options, dict):
        raise ConfigurationError(f"compilerOptions in {config_file_path} must be an object")
    merged.compiler_options.update(options)
    if options.get("baseUrl"):
        merged.base_url = os.path.normpath(os.path.join(config_dir, options["baseUrl"]))

    own_specs = False
    for attr in ("files", "include", "exclude"):
        value = cfg.get(attr)
        if value is not None:
            if not isinstance(value, list):
                raise ConfigurationError(f"'{attr}' in {config_file_path} must be a list")
            setattr(merged, attr, [normalize_spec(str(v)) for v in value])
            own_specs = True
    if own_specs:
        merged.spec_dir = config_dir
    return merged
