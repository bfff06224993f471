import os
import re
import posixpath
from typing import Dict, List, Optional

from tscodemap.models import CodebaseMap

IMPORT_SOURCE_RE = re.compile(
    r"""\bfrom\s+['"]([^'"]+)['"]|^import\s+['"]([^'"]+)['"]|\brequire\(\s*['"]([^'"]+)['"]\s*\)"""
)
RESOLVE_SUFFIXES = ("", ".ts", ".tsx", "/index.ts", "/index.tsx")


def import_specifier(statement: str) -> Optional[str]:
    m = IMPORT_SOURCE_RE.search(statement.strip())
    if not m:
        return None
    return next(group for group in m.groups() if group)


def resolve_alias(specifier: str, paths_base: str, alias_paths: Dict[str, List[str]]) -> List[str]:
    """Absolute candidate paths for a tsconfig ``paths`` alias, most specific pattern first."""

    def sort_key(item):
        pat = item[0]
        return (pat.count("*"), -len(pat))

    for alias_pattern, targets in sorted(alias_paths.items(), key=sort_key):
        if "*" in alias_pattern:
            regex = "^" + re.escape(alias_pattern).replace(r"\*", "(.+)") + "$"
            m = re.match(regex, specifier)
            if not m:
                continue
            wildcards = m.groups()
        else:
            if specifier != alias_pattern:
                continue
            wildcards = ()

        candidates = []
        for tpl in targets:
            rel = tpl
            for w in wildcards:
                rel = rel.replace("*", w, 1)
            candidates.append(os.path.normpath(os.path.join(paths_base, rel)))
        return candidates
    return []


def resolve_import(
    module_path: str,
    specifier: str,
    module_paths,
    root_dir: Optional[str] = None,
    paths_base: Optional[str] = None,
    alias_paths: Optional[Dict[str, List[str]]] = None,
) -> Optional[str]:
    """Module path an import specifier points at, or None when it leaves the project."""
    bases = []
    if specifier.startswith("."):
        bases.append(posixpath.normpath(posixpath.join(posixpath.dirname(module_path), specifier)))
    elif alias_paths and root_dir:
        for target in resolve_alias(specifier, paths_base or root_dir, alias_paths):
            bases.append(os.path.relpath(target, root_dir).replace("\\", "/"))

    for base in bases:
        for suffix in RESOLVE_SUFFIXES:
            if base + suffix in module_paths:
                return base + suffix
    return None


def make_node_id(module: str, name: Optional[str] = None, class_name: Optional[str] = None) -> str:
    if class_name and name:
        return f"{module}::{class_name}::{name}"
    if name:
        return f"{module}::{name}"
    return module


def adapt_codebase_map(
    codebase_map: CodebaseMap,
    root_dir: Optional[str] = None,
    paths_base: Optional[str] = None,
    alias_paths: Optional[Dict[str, List[str]]] = None,
):
    """Flatten a codebase map into ``{"nodes": [...], "edges": [...]}``.

    Modules, classes and declarations become nodes. ``contains`` edges link
    owners to members and ``imports`` edges link modules whose import
    specifiers resolve to another module of the same project.
    """
    nodes = []
    edges = []

    def add_member(owner_id, node_id, category, module_path, **attrs):
        nodes.append({"id": node_id, "category": category, "module": module_path, **attrs})
        edges.append({"from": owner_id, "to": node_id, "relation": "contains"})

    for project_name, project in codebase_map.items():
        module_paths = set(project.modules)
        for module_path, module in project.modules.items():
            nodes.append({
                "id": module_path,
                "category": "module",
                "project": project_name,
                "file_name": posixpath.basename(module_path),
            })

            for cls in module.classes:
                class_name = cls.name or "default"
                class_id = make_node_id(module_path, class_name)
                add_member(module_path, class_id, "class", module_path, name=class_name)
                for fn in cls.functions:
                    add_member(
                        class_id, make_node_id(module_path, fn.name, class_name), "method", module_path,
                        name=fn.name, return_type=fn.return_type,
                        parameters=[p.to_dict() for p in fn.parameters],
                    )
                for prop in cls.properties:
                    add_member(
                        class_id, make_node_id(module_path, prop.name, class_name), "field", module_path,
                        name=prop.name, type=prop.type,
                    )

            for fn in module.functions:
                add_member(
                    module_path, make_node_id(module_path, fn.name), "function", module_path,
                    name=fn.name, return_type=fn.return_type,
                    parameters=[p.to_dict() for p in fn.parameters],
                )
            for iface in module.interfaces:
                add_member(
                    module_path, make_node_id(module_path, iface.name), "interface", module_path,
                    name=iface.name, properties=[p.to_dict() for p in iface.properties],
                )
            for enum in module.enums:
                add_member(
                    module_path, make_node_id(module_path, enum.name), "enum", module_path,
                    name=enum.name, members=[m.name for m in enum.members],
                )

            for statement in module.dependencies:
                specifier = import_specifier(statement)
                if not specifier:
                    continue
                target = resolve_import(module_path, specifier, module_paths, root_dir, paths_base, alias_paths)
                if target and target != module_path:
                    edges.append({
                        "from": module_path,
                        "to": target,
                        "relation": "imports",
                        "specifier": specifier,
                    })

    return {"nodes": nodes, "edges": edges}
