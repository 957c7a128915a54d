"""Lazily initialized values whose initializers may fail."""

from importlib.metadata import PackageNotFoundError, version

from . import checked, concurrent, config, failure, log, stack_context, thunks  # noqa: F401
from .checked import CheckedSupplier, LazyValue, State  # noqa: F401
from .concurrent import ConcurrentLazyValue, ThreadLocalLazyValue, lazy, threadlocal_lazy  # noqa: F401
from .failure import InvalidFailurePolicy  # noqa: F401
from .thunks import Thunk, deferred, lazy_call, lazy_value  # noqa: F401

try:
    __version__ = version("thds.lazyval")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
