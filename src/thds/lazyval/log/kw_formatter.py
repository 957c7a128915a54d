import logging
import typing as ty

from .. import config
from .kw_logger import keyvals_from_record

MAX_MODULE_NAME_LEN = config.item("thds.lazyval.log.max_module_name_len", 40, parse=int)


class CompactFormatter(logging.Formatter):
    """One line per record: time, level, module name, keyword context, message."""

    @staticmethod
    def format_module_name(name: str) -> str:
        max_len = MAX_MODULE_NAME_LEN()
        if len(name) > max_len:
            name = name[: max_len // 2 - 2] + "..." + name[-max_len // 2 + 1 :]
        assert len(name) <= max_len
        return name.ljust(max_len)

    @staticmethod
    def format_level(record: logging.LogRecord) -> str:
        # quieter levels are lowercased so that warnings and errors stand out.
        levelname = f"{record.levelname:7}"
        return levelname.lower() if record.levelno < logging.WARNING else levelname

    def _exception_and_stack(self, record: logging.LogRecord) -> str:
        formatted = ""
        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            formatted += "\n" + record.exc_text
        if record.stack_info:
            formatted += "\n" + self.formatStack(record.stack_info)
        return formatted

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        context: ty.Any = keyvals_from_record(record) or "()"
        formatted = (
            f"{self.formatTime(record)} {self.format_level(record)}"
            f"  {self.format_module_name(record.name)} {context} {record.message}"
        )
        return formatted + self._exception_and_stack(record)
