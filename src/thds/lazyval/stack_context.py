"""Values that are set for everything below a given point on the call stack.

Config overrides and logger context both need a value that applies only while a `with`
block is active, and only to the current thread (or task, under asyncio).
"""
import contextlib as cl
import contextvars as cv
import typing as ty

T = ty.TypeVar("T")


@cl.contextmanager
def _scoped(contextvar: cv.ContextVar[T], value: T) -> ty.Iterator[T]:
    token = contextvar.set(value)
    try:
        yield value
    finally:
        contextvar.reset(token)


class StackContext(ty.Generic[T]):
    """A ContextVar that may only be set for the duration of a `with` block.

    Create these at module scope, the same as you would a ContextVar.
    """

    def __init__(self, debug_name: str, default: T):
        self._contextvar = cv.ContextVar(debug_name, default=default)

    def set(self, value: T) -> ty.ContextManager[T]:
        return _scoped(self._contextvar, value)

    def __call__(self) -> T:
        return self._contextvar.get()
