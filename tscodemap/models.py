from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class PropertyInfo:
    """A class property, function parameter or interface property."""

    name: str
    type: Optional[str] = None

    def to_dict(self):
        return _drop_none({"name": self.name, "type": self.type})


@dataclass(frozen=True)
class FunctionInfo:
    name: str
    content: str
    parameters: List[PropertyInfo] = field(default_factory=list)
    return_type: Optional[str] = "any"
    comments: Optional[str] = None

    def to_dict(self):
        return _drop_none({
            "name": self.name,
            "content": self.content,
            "parameters": [p.to_dict() for p in self.parameters],
            "returnType": self.return_type,
            "comments": self.comments,
        })


@dataclass(frozen=True)
class InterfaceInfo:
    name: str
    properties: List[PropertyInfo] = field(default_factory=list)
    summary: Optional[str] = None

    def to_dict(self):
        return _drop_none({
            "name": self.name,
            "properties": [p.to_dict() for p in self.properties],
            "summary": self.summary,
        })


@dataclass(frozen=True)
class EnumMember:
    name: str
    value: Optional[str] = None

    def to_dict(self):
        return _drop_none({"name": self.name, "value": self.value})


@dataclass(frozen=True)
class EnumInfo:
    name: str
    members: List[EnumMember] = field(default_factory=list)
    summary: Optional[str] = None

    def to_dict(self):
        return _drop_none({
            "name": self.name,
            "members": [m.to_dict() for m in self.members],
            "summary": self.summary,
        })


@dataclass
class ClassInfo:
    """Members of one class declaration, in source order."""

    name: Optional[str] = None
    functions: List[FunctionInfo] = field(default_factory=list)
    properties: List[PropertyInfo] = field(default_factory=list)
    interfaces: List[InterfaceInfo] = field(default_factory=list)
    enums: List[EnumInfo] = field(default_factory=list)

    def to_dict(self):
        return _drop_none({
            "name": self.name,
            "functions": [f.to_dict() for f in self.functions],
            "properties": [p.to_dict() for p in self.properties],
            "interfaces": [i.to_dict() for i in self.interfaces],
            "enums": [e.to_dict() for e in self.enums],
        })


@dataclass
class ModuleInfo:
    """Top-level declarations of one source file.

    Class members live on their ``ClassInfo`` and are never repeated here.
    """

    path: str
    classes: List[ClassInfo] = field(default_factory=list)
    functions: List[FunctionInfo] = field(default_factory=list)
    interfaces: List[InterfaceInfo] = field(default_factory=list)
    enums: List[EnumInfo] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            "path": self.path,
            "classes": [c.to_dict() for c in self.classes],
            "functions": [f.to_dict() for f in self.functions],
            "interfaces": [i.to_dict() for i in self.interfaces],
            "enums": [e.to_dict() for e in self.enums],
            "dependencies": list(self.dependencies),
        }


@dataclass
class ProjectMap:
    modules: Dict[str, ModuleInfo] = field(default_factory=dict)

    def to_dict(self):
        return {"modules": {path: m.to_dict() for path, m in self.modules.items()}}


class CodebaseMap(dict):
    """``{project_name: ProjectMap}`` with exactly one project per run."""

    def to_dict(self):
        return {name: project.to_dict() for name, project in self.items()}
