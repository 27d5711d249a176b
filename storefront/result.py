"""
Result type returned by transactional procedures
"""
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from storefront.errors import StorefrontError

T = TypeVar("T")
E = TypeVar("E", bound=StorefrontError)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E


Result = Union[Ok[T], Err[E]]


def unwrap(result: "Result[T, E]") -> T:
    """Return the value of an Ok, raise the error of an Err"""
    if isinstance(result, Err):
        raise result.error
    return result.value
