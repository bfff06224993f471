from abc import ABC, abstractmethod


class CodeMapper(ABC):
    @abstractmethod
    async def get_source_files(self):
        pass

    @abstractmethod
    async def build_codebase_map(self):
        pass

    @abstractmethod
    def get_codebase_map(self):
        pass

    @abstractmethod
    def write_to_file(self, output_path: str):
        pass
