"""
Tagged results for API operations.

Every API client call returns either Ok(value) or Err(...). Callers that want
exceptions call .unwrap(); callers that want to branch check .is_ok.

    result = client.get_recipe(recipe_id)
    if result.is_ok:
        show(result.value)
    else:
        show_error(result.message)
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

from apicius.errors import ApiError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful API result."""
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """
    Failed API result.

    Attributes:
        kind: One of the ErrorKind constants
        message: Human-readable message
        status: HTTP status code, if any
        code: Backend error code, if any
    """
    kind: str
    message: str
    status: Optional[int] = None
    code: Optional[str] = None

    @property
    def is_ok(self) -> bool:
        return False

    def to_exception(self) -> ApiError:
        return ApiError(self.kind, self.message, status=self.status, code=self.code)

    def unwrap(self) -> Any:
        raise self.to_exception()


ApiResult = Union[Ok[T], Err]
