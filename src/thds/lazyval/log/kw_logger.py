"""A logger adapter that accepts arbitrary keyword arguments and carries them on the record."""

import contextlib
import logging
import typing as ty
from copy import copy

from .. import config
from ..stack_context import StackContext

LOGLEVEL = config.item("thds.lazyval.log.level", logging.INFO, parse=logging.getLevelName)
_LOGGING_KWARGS = ("exc_info", "stack_info", "stacklevel", "extra")
# passed straight through to logging; every other keyword becomes context.

TH_REC_CTXT = "th_context"
# attribute name on the LogRecord; usable as %(th_context)s in a format string.


class _KwContext(ty.Dict[str, ty.Any]):
    def __str__(self):
        return "(" + ",".join(f"{k}={v!r}" for k, v in self.items()) + ")"


_LOG_CONTEXT: StackContext[_KwContext] = StackContext("thds.lazyval.log context", _KwContext())


@contextlib.contextmanager
def logger_context(**kwargs: ty.Any) -> ty.Iterator[None]:
    """Every log statement below this point on the stack will carry these key-values."""
    with _LOG_CONTEXT.set(_KwContext(_LOG_CONTEXT(), **kwargs)):
        yield


def _embed_context(kwargs: ty.MutableMapping[str, ty.Any]) -> ty.MutableMapping[str, ty.Any]:
    context = _LOG_CONTEXT()
    kw_names = [k for k in kwargs if k not in _LOGGING_KWARGS]
    if kw_names:
        context = copy(context)
        context.update((k, kwargs.pop(k)) for k in kw_names)
    extra = kwargs["extra"] = dict(kwargs.get("extra") or dict())
    extra[TH_REC_CTXT] = context
    return kwargs


class KwLogger(logging.LoggerAdapter):
    """`logger.debug("message", key=value)` with no `extra` dictionary required."""

    def process(self, msg, kwargs):
        return msg, _embed_context(kwargs)


def keyvals_from_record(record: logging.LogRecord) -> ty.Optional[ty.Dict[str, ty.Any]]:
    return getattr(record, TH_REC_CTXT, None)


def getLogger(name: ty.Optional[str] = None) -> KwLogger:
    logger = logging.getLogger(name)
    if logger.level == logging.NOTSET:
        logger.setLevel(LOGLEVEL())
    return KwLogger(logger, dict())
