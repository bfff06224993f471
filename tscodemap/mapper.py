import os
import json
import asyncio
from typing import List, Optional

from tscodemap.base.code_mapper import CodeMapper
from tscodemap.discovery import find_project_root, get_source_files
from tscodemap.errors import MissingSourceFileError
from tscodemap.extractors import DeclarationExtractor, MemberAggregator, build_dependency_graph
from tscodemap.logger import ApplicationLogger, log_error
from tscodemap.models import CodebaseMap, ModuleInfo, ProjectMap
from tscodemap.parsing import ParsedFile, TypeScriptProgram
from tscodemap.result import Result


class TypeScriptCodeMapper(CodeMapper):
    """Builds a ``CodebaseMap`` for the TypeScript project under ``root_dir``.

    ``root_dir`` defaults to the nearest ancestor of the working directory
    that holds a package.json. The single project key is the base name of
    the working directory. A missing tsconfig.json raises
    ``ConfigurationError`` from the constructor.
    """

    def __init__(
        self,
        root_dir: Optional[str] = None,
        tsconfig_path: Optional[str] = None,
        project_name: Optional[str] = None,
        program: Optional[TypeScriptProgram] = None,
    ):
        self.root_dir = os.path.abspath(root_dir) if root_dir else find_project_root()
        self.project_name = project_name or os.path.basename(os.getcwd())
        self.program = program or TypeScriptProgram(self.root_dir, tsconfig_path)
        self.extractor = DeclarationExtractor(self.program)
        self.aggregator = MemberAggregator(self.extractor)
        self.logger = ApplicationLogger()
        self.codebase_map: Optional[CodebaseMap] = None

    async def get_source_files(self) -> List[str]:
        return await get_source_files(self.root_dir)

    def extract_module_info(self, parsed_file: ParsedFile, relative_path: str) -> ModuleInfo:
        return ModuleInfo(
            path=relative_path,
            dependencies=build_dependency_graph(parsed_file, self.program),
        )

    async def build_codebase_map(self) -> Result[CodebaseMap]:
        """Maps every discovered file; any failure aborts the whole run."""
        codebase_map = CodebaseMap()
        project = ProjectMap()
        codebase_map[self.project_name] = project

        source_files = await self.get_source_files()
        self.logger.log(
            {"method": "build_codebase_map"},
            f"Mapping {len(source_files)} files under {self.root_dir}",
        )
        for relative_path in source_files:
            parsed_file = self.program.get_source_file(relative_path)
            if parsed_file is None:
                error = MissingSourceFileError(relative_path)
                log_error(error, "build_codebase_map", {"file": relative_path})
                raise error

            module_info = self.extract_module_info(parsed_file, relative_path)
            self.aggregator.aggregate_module(module_info, parsed_file)
            project.modules[relative_path] = module_info

        self.codebase_map = codebase_map
        return Result.ok(codebase_map)

    def build_codebase_map_sync(self) -> Result[CodebaseMap]:
        return asyncio.run(self.build_codebase_map())

    def get_codebase_map(self) -> Optional[CodebaseMap]:
        return self.codebase_map

    def write_to_file(self, output_path: str):
        if self.codebase_map is None:
            raise RuntimeError("build_codebase_map must run before write_to_file")
        parent = os.path.dirname(output_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.codebase_map.to_dict(), f, indent=2, ensure_ascii=False)
