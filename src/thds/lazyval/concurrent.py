"""Thread-safe siblings of LazyValue."""

import typing as ty
from threading import Lock, local

from .checked import LazyValue, State
from .failure import FailurePolicy, resolve

R = ty.TypeVar("R")
_LOCK_LOCK = Lock()  # guards creation of the per-storage lock and holder.


def _get_or_create_holder(
    storage: ty.Any, source: ty.Callable[[], R], failure: FailurePolicy
) -> ty.Tuple[Lock, LazyValue[R]]:
    """Puts a lock and an unsynchronized LazyValue on the storage object, exactly once.

    Storage can be any object that can have an attribute assigned with __setattr__. For
    thread-local storage, each thread sees its own attributes, so each thread gets its own
    lock and holder.
    """
    if hasattr(storage, "holder"):
        return storage.lock, storage.holder
    with _LOCK_LOCK:
        if not hasattr(storage, "holder"):
            storage.lock = Lock()
            storage.holder = LazyValue(source, failure=failure)
    return storage.lock, storage.holder


class ConcurrentLazyValue(ty.Generic[R]):
    """Ensures that the zero-argument callable succeeds at most once for the lifetime of
    this wrapper and its storage, even when many threads race on the first `get()`.

    Failures behave as they do for LazyValue, under the same failure policy. Under
    "retry", the next thread to acquire the lock tries again.

    If thread-local storage is provided, the source succeeds at most once per thread.
    """

    def __init__(
        self,
        source: ty.Callable[[], R],
        *,
        failure: ty.Optional[str] = None,
        storage: ty.Any = None,
    ):
        self._source = source
        self._failure = resolve(failure)
        self._storage = storage if storage is not None else lambda: 0
        # a function object is a cheap thing to hang attributes off of.
        _get_or_create_holder(self._storage, source, self._failure)
        # creating the first lock here means that, without thread-local storage, we never
        # contend on the module-level lock.

    def _holder(self) -> ty.Tuple[Lock, LazyValue[R]]:
        return _get_or_create_holder(self._storage, self._source, self._failure)

    @property
    def state(self) -> State:
        return self._holder()[1].state

    @property
    def initialized(self) -> bool:
        return self._holder()[1].initialized

    @property
    def settled(self) -> bool:
        return self._holder()[1].settled

    @property
    def failure_policy(self) -> FailurePolicy:
        return self._failure

    def get(self) -> R:
        lock, holder = self._holder()
        if holder.settled:
            return holder.get()
        with lock:
            return holder.get()

    __call__ = get

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._source})"

    if not ty.TYPE_CHECKING:
        # without the guard, mypy would allow any attribute access (as Any).
        def __getattr__(self, name: str) -> ty.NoReturn:
            if name.startswith("_"):
                # copy and pickle look these up before __init__ has run.
                raise AttributeError(name)
            raise AttributeError(
                f"{self} has no attribute '{name}' -"
                f" did you mean to get the value before access, i.e. `.get().{name}`?"
            )


class ThreadLocalLazyValue(ConcurrentLazyValue[R]):
    """A ConcurrentLazyValue with thread-local storage."""

    def __init__(self, source: ty.Callable[[], R], *, failure: ty.Optional[str] = None):
        # each local() is a brand new namespace, so instances never share storage.
        super().__init__(source, failure=failure, storage=local())


def lazy(source: ty.Callable[[], R], *, failure: ty.Optional[str] = None) -> ConcurrentLazyValue[R]:
    """Wraps a thunk so that it succeeds at most once, and the result is cached."""
    return ConcurrentLazyValue(source, failure=failure)


def threadlocal_lazy(
    source: ty.Callable[[], R], *, failure: ty.Optional[str] = None
) -> ThreadLocalLazyValue[R]:
    """Wraps a thunk so that it succeeds at most once per thread, and the result is cached."""
    return ThreadLocalLazyValue(source, failure=failure)
