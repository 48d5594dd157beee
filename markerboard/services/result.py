"""
Outcome of mapping one storage row.

Malformed rows are business as usual for the dashboard, not exceptional:
mappers return a ``Result`` holding either the model or the reason it was
rejected, and the loader decides to keep or skip-and-log.
"""

from dataclasses import dataclass
from typing import Generic

from typing_extensions import TypeVar

ValueT = TypeVar("ValueT")
ErrorT = TypeVar("ErrorT", bound=BaseException, default=Exception)


@dataclass(frozen=True, slots=True)
class Result(Generic[ValueT, ErrorT]):
    value: ValueT | None = None
    error: ErrorT | None = None

    def __post_init__(self) -> None:
        if (self.value is None) == (self.error is None):
            raise ValueError("Result holds exactly one of value or error")

    @classmethod
    def ok(cls, value: ValueT) -> "Result[ValueT, ErrorT]":
        return cls(value=value)

    @classmethod
    def err(cls, error: ErrorT) -> "Result[ValueT, ErrorT]":
        return cls(error=error)

    def is_ok(self) -> bool:
        return self.error is None

    def is_err(self) -> bool:
        return self.error is not None

    def unwrap(self) -> ValueT:
        """The mapped model; re-raises the mapping error on a rejected row."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_err(self) -> ErrorT:
        if self.error is None:
            raise ValueError(f"no error on an ok result: {self.value!r}")
        return self.error
