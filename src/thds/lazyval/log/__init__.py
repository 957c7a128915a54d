"""Keyword logging.

Keyword arguments to a log call are carried on the record and rendered by the
formatter. `logger_context` adds key-values to every log call made further down
the stack, until the `with` block exits.

```
logger = getLogger("FooF")
logger.info("testing", two=3)
# 2022-02-18 10:01:16,826 info     FooF (two=3) testing
with logger_context(app="bat"):
    logger.info("testing 2", yes="no")
# 2022-02-18 10:01:16,827 info     FooF (app='bat',yes='no') testing 2
```
"""

from .basic_config import configure_console_logging, set_logger_to_console_level  # noqa: F401
from .kw_formatter import CompactFormatter  # noqa: F401
from .kw_logger import KwLogger, getLogger, logger_context  # noqa: F401

configure_console_logging()
