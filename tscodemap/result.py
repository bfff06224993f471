from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class Result(Generic[T]):
    def __init__(self, is_success: bool, data: Optional[T] = None, message: Optional[str] = None):
        self.is_success = is_success
        self._data = data
        self.message = message

    def is_ok(self) -> bool:
        return self.is_success

    def get_value(self) -> T:
        return self._data

    def get_error(self) -> Optional[str]:
        if self.is_success:
            return None
        return self.message or "unknown error"

    @staticmethod
    def ok(data: T, message: Optional[str] = None) -> "Result[T]":
        return Result(True, data, message)

    @staticmethod
    def fail(data: T, message: Optional[str] = None) -> "Result[T]":
        return Result(False, data, message)

    def __repr__(self):
        state = "ok" if self.is_success else "fail"
        return f"Result.{state}({self._data!r})"
