import sys
import typing as ty
from dataclasses import dataclass

from .checked import LazyValue

if sys.version_info >= (3, 10):
    from typing import ParamSpec
else:
    from typing_extensions import ParamSpec

P = ParamSpec("P")
R = ty.TypeVar("R")


@dataclass
class Thunk(ty.Generic[R]):
    """The zero-argument source behind `lazy_call` and `deferred`.

    Arguments are bound at construction, so a LazyValue can hold a call to any function
    and still see a plain `() -> R` source. Being a dataclass, its repr shows the bound
    call, which is what appears in a LazyValue's repr and in its failure logs.
    """

    func: ty.Callable
    args: P.args
    kwargs: P.kwargs

    def __init__(self, func: ty.Callable[P, R], *args: P.args, **kwargs: P.kwargs):
        self.func = func
        self.args = args
        self.kwargs = kwargs

    def __call__(self) -> R:
        return ty.cast(R, self.func(*self.args, **self.kwargs))


def lazy_call(func: ty.Callable[P, R], *args: P.args, **kwargs: P.kwargs) -> LazyValue[R]:
    """The call happens on the first `.get()`, and never again once it has succeeded."""
    return LazyValue(Thunk(func, *args, **kwargs))


def deferred(func: ty.Callable[P, R]) -> ty.Callable[P, LazyValue[R]]:
    """Converts a function into one that accepts the exact same arguments but returns
    a LazyValue, so the call itself happens only when (and if) the value is needed.
    """

    def wrapper(*args: P.args, **kwargs: P.kwargs) -> LazyValue[R]:
        return LazyValue(Thunk(func, *args, **kwargs))

    return wrapper


@ty.overload
def lazy_value(source: ty.Callable[[], R]) -> LazyValue[R]:
    ...  # pragma: no cover


@ty.overload
def lazy_value(*, failure: str) -> ty.Callable[[ty.Callable[[], R]], LazyValue[R]]:
    ...  # pragma: no cover


def lazy_value(source=None, *, failure=None):
    """Decorates a zero-argument function, replacing it with a LazyValue.

    ```
    @lazy_value
    def settings():
        return load_settings_or_raise()

    @lazy_value(failure="poison")
    def client():
        return connect()
    ```
    """
    if source is None:
        return lambda src: LazyValue(src, failure=failure)
    return LazyValue(source, failure=failure)
