from tscodemap.errors import CodeMapperError, ConfigurationError, MalformedNodeError, MissingSourceFileError
from tscodemap.mapper import TypeScriptCodeMapper
from tscodemap.models import CodebaseMap, ModuleInfo, ProjectMap
from tscodemap.result import Result

__all__ = [
    "CodeMapperError",
    "CodebaseMap",
    "ConfigurationError",
    "MalformedNodeError",
    "MissingSourceFileError",
    "ModuleInfo",
    "ProjectMap",
    "Result",
    "TypeScriptCodeMapper",
]
