"""A precise, human readable summary of a LogRecord, typically on 1 or 2 lines.

The template and the thread id mode are resolved once, when the formatter is
constructed; see `thds.linefmt.settings` for the template syntax. With
`logging.config.dictConfig`:

    "formatters": {
        "line": {
            "()": "thds.linefmt.formatter.ThdsLineFormatter",
            "fmt": "{level}: {message} [{timestamp:%c}]",
            "thread_id_format": "id",
        }
    }
"""

import logging
import typing as ty
from datetime import datetime

from . import records, thread_names
from .settings import FormatConfig, ThreadIdMode, render, resolve_config


class ThdsLineFormatter(logging.Formatter):
    """Renders the timestamp, source, logger, level, message, exception, thread and
    sequence number of a record into a configurable template.

    Exceptions and stack traces are indented by one space, to make searching the
    logs easier.
    """

    def __init__(
        self,
        fmt: ty.Optional[str] = None,
        thread_id_format: ty.Optional[str] = None,
        *,
        config: ty.Optional[FormatConfig] = None,
    ):
        super().__init__()
        self.config = config if config is not None else resolve_config(fmt, thread_id_format)

    def _format_exception_and_trace(self, record: logging.LogRecord) -> str:
        formatted = ""
        if record.exc_info:
            if not record.exc_text:
                record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            formatted += "\n " + record.exc_text
        if record.stack_info:
            formatted += "\n " + self.formatStack(record.stack_info)
        return formatted

    def _thread_display(self, record: logging.LogRecord) -> str:
        thread_id = records.thread_id_of(record)
        if thread_id is None:
            return record.threadName or ""
        if self.config.thread_id_mode is ThreadIdMode.ID:
            return str(thread_id)
        if not records.has_native_thread_id(record) and record.threadName:
            # an unstamped record only has the pointer-sized ident, which can't be looked up.
            return record.threadName
        return thread_names.resolve_thread_name(thread_id, current_name=record.threadName)

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        return render(
            self.config.template,
            (
                datetime.fromtimestamp(record.created).astimezone(),
                records.source_of(record),
                record.name,
                record.levelname,
                record.message,
                self._format_exception_and_trace(record),
                self._thread_display(record),
                records.sequence_number_of(record),
            ),
        )
