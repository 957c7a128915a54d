"""A lazily initialized value whose initializer is allowed to fail.

This holder is NOT thread-safe. If more than one thread may race on the first access,
use `thds.lazyval.concurrent.ConcurrentLazyValue` instead.
"""

import enum
import typing as ty
from types import TracebackType

from .failure import POISON, FailurePolicy, resolve
from .log import getLogger

T = ty.TypeVar("T")
T_co = ty.TypeVar("T_co", covariant=True)

logger = getLogger(__name__)


class State(enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    FAILED = "failed"  # only reachable under the "poison" failure policy.


class CheckedSupplier(ty.Protocol[T_co]):
    """Anything that can produce a value, or raise trying."""

    def get(self) -> T_co:
        ...  # pragma: no cover


class LazyValue(ty.Generic[T]):
    """Calls the zero-argument `source` on the first `get()`, and caches what it returns.

    The source is called only once, even if it returns None.

    If the source raises, the exception propagates to the caller of `get()` unchanged.
    What happens on the next `get()` is up to the failure policy - see
    `thds.lazyval.failure`. By default, the next `get()` calls the source again.
    """

    def __init__(self, source: ty.Callable[[], T], *, failure: ty.Optional[str] = None):
        self._source = source
        self._failure = resolve(failure)
        self._state = State.UNINITIALIZED
        self._value: ty.Optional[T] = None
        self._error: ty.Optional[BaseException] = None
        self._traceback: ty.Optional[TracebackType] = None

    @property
    def state(self) -> State:
        return self._state

    @property
    def initialized(self) -> bool:
        return self._state is State.INITIALIZED

    @property
    def settled(self) -> bool:
        """True once `get()` will never call the source again."""
        return self._state is not State.UNINITIALIZED

    @property
    def failure_policy(self) -> FailurePolicy:
        return self._failure

    def get(self) -> T:
        if self._state is State.UNINITIALIZED:
            try:
                value = self._source()
            except Exception as err:
                logger.debug(
                    "Lazy initialization failed",
                    source=self._source,
                    error=type(err).__name__,
                    on_failure=self._failure,
                )
                if self._failure == POISON:
                    self._error = err
                    # from the source down; each re-raise adds its own get() frame.
                    self._traceback = err.__traceback__.tb_next if err.__traceback__ else None
                    self._state = State.FAILED
                raise
            self._value = value
            self._state = State.INITIALIZED
        elif self._state is State.FAILED:
            assert self._error is not None
            # the traceback captured when poisoned, so it never grows.
            raise self._error.with_traceback(self._traceback)
        return ty.cast(T, self._value)

    __call__ = get

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._source}, state={self._state.value})"
