class CodeMapperError(Exception):
    pass


class MalformedNodeError(CodeMapperError):
    """A declaration node is missing an identifier or has an unexpected shape."""


class MissingSourceFileError(CodeMapperError):
    """A discovered path has no parsed tree in the program."""

    def __init__(self, file_path):
        super().__init__(f"No source file found for {file_path}")
        self.file_path = file_path


class ConfigurationError(CodeMapperError):
    """tsconfig.json could not be read or parsed."""
