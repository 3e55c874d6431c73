"""
Result envelope for consistent success/failure handling.

Step functions handed to the runner report their outcome as ``Ok(value)`` or
``Err(reason)`` instead of raising: a failing step is ordinary data that the
runner threads back to the caller, while exceptions stay reserved for
programming errors.

Unlike a typical exception-only Result, ``Err`` accepts any reason (an atom-like
string, a dict, an exception), because step failures are business data.

Architecture:
    ::

        ┌─────────────────┬─────────────────┬─────────────────────────┐
        │     Ok[T]       │     Err[E]      │     Utilities           │
        ├─────────────────┼─────────────────┼─────────────────────────┤
        │ • value: T      │ • error: E      │ • try_result()          │
        │ • map()         │ • map_err()     │ • collect_results()     │
        │ • flat_map()    │ • or_else()     │                         │
        │ • unwrap()      │ • unwrap_or()   │                         │
        └─────────────────┴─────────────────┴─────────────────────────┘

Examples:
    >>> from essentials.core.result import Ok, Err
    >>> def divide(a: int, b: int):
    ...     if b == 0:
    ...         return Err("division_by_zero")
    ...     return Ok(a / b)
    >>> match divide(10, 2):
    ...     case Ok(value):
    ...         print(f"Result: {value}")
    ...     case Err(reason):
    ...         print(f"Error: {reason}")
    Result: 5.0
    >>> divide(1, 0).map(lambda x: x * 2).unwrap_or(0)
    0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from essentials.core.errors import EssentialsError


T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


class UnwrapError(EssentialsError):
    """Raised when unwrapping an ``Err`` whose reason is not an exception."""

    def __init__(self, reason: Any):
        super().__init__(f"Called unwrap() on Err: {reason!r}")
        self.reason = reason


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Successful result containing a value.

    Examples:
        >>> Ok(10).map(lambda x: x * 2).unwrap()
        20
        >>> Ok(5).flat_map(lambda x: Ok(x) if x > 0 else Err("negative")).is_ok()
        True
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_or_else(self, f: Callable[[Any], T]) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U, Any]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def flat_map(self, f: Callable[[T], Result[U, Any]]) -> Result[U, Any]:
        """Chain to another Result-returning function."""
        return f(self.value)

    def and_then(self, f: Callable[[T], Result[U, Any]]) -> Result[U, Any]:
        """Alias for flat_map."""
        return f(self.value)

    def map_err(self, f: Callable[[Any], Any]) -> Result[T, Any]:
        return self

    def or_else(self, f: Callable[[Any], Result[T, Any]]) -> Result[T, Any]:
        return self

    def inspect(self, f: Callable[[T], None]) -> Result[T, Any]:
        """Call f with value for side effects, return self."""
        f(self.value)
        return self

    def inspect_err(self, f: Callable[[Any], None]) -> Result[T, Any]:
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """
    Failed result carrying a reason.

    The reason can be any value. ``unwrap()`` re-raises it when it is an
    exception and raises ``UnwrapError`` otherwise.

    Examples:
        >>> Err("boom").unwrap_or(0)
        0
        >>> Err("boom").map_err(str.upper)
        Err('BOOM')
    """

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        """Raise the error. Unsafe for Err."""
        if isinstance(self.error, BaseException):
            raise self.error
        raise UnwrapError(self.error)

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_or_else(self, f: Callable[[E], T]) -> T:
        """Compute a fallback from the error."""
        return f(self.error)

    def map(self, f: Callable[[Any], U]) -> Result[U, E]:
        return self

    def flat_map(self, f: Callable[[Any], Result[U, E]]) -> Result[U, E]:
        return self

    def and_then(self, f: Callable[[Any], Result[U, E]]) -> Result[U, E]:
        return self

    def map_err(self, f: Callable[[E], Any]) -> Result[Any, Any]:
        """Transform the error."""
        return Err(f(self.error))

    def or_else(self, f: Callable[[E], Result[T, Any]]) -> Result[T, Any]:
        """Call f with error to try recovery."""
        return f(self.error)

    def inspect(self, f: Callable[[Any], None]) -> Result[Any, E]:
        return self

    def inspect_err(self, f: Callable[[E], None]) -> Result[Any, E]:
        """Call f with error for side effects, return self."""
        f(self.error)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        if isinstance(self.error, EssentialsError):
            return {"ok": False, "error": self.error.to_dict()}
        if isinstance(self.error, BaseException):
            return {
                "ok": False,
                "error": {
                    "error_type": type(self.error).__name__,
                    "message": str(self.error),
                },
            }
        return {"ok": False, "error": self.error}

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[E]


def is_result(value: Any) -> bool:
    """Whether ``value`` is an ``Ok`` or an ``Err``."""
    return isinstance(value, (Ok, Err))


def try_result(f: Callable[[], T]) -> Result[T, Exception]:
    """
    Execute a zero-argument function and wrap the outcome.

    Returns ``Ok`` with the return value, or ``Err`` with the raised exception.

    Examples:
        >>> import json
        >>> try_result(lambda: json.loads('{"a": 1}')).unwrap()
        {'a': 1}
        >>> try_result(lambda: json.loads('invalid')).is_err()
        True
    """
    try:
        return Ok(f())
    except Exception as e:
        return Err(e)


def collect_results(results: list[Result[T, E]]) -> Result[list[T], E]:
    """
    Collect a list of Results into a Result of list (fail-fast).

    Examples:
        >>> collect_results([Ok(1), Ok(2)]).unwrap()
        [1, 2]
        >>> collect_results([Ok(1), Err("a"), Err("b")])
        Err('a')
    """
    values = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                return Err(error)
    return Ok(values)


__all__ = [
    "Ok",
    "Err",
    "Result",
    "UnwrapError",
    "is_result",
    "try_result",
    "collect_results",
]
