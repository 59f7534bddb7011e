"""Result: tagged success/failure values returned by admission and validation checks.

Invariants:
    - Ok carries a value, Err carries a ToolboxError; never both
    - Checks return a Result instead of raising for expected failures
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from toolbox_gateway.core.errors import ToolboxError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: ToolboxError

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
