"""Resolves the format template and the thread id mode for a ThdsLineFormatter.

Both come from, in order: an explicit argument, the environment
(`THDS_LINEFMT_FORMAT`, `THDS_LINEFMT_THREAD_ID_FORMAT`), the config store, and
finally the defaults below.

Templates use `str.format` syntax. Each of the eight values is available by name
or by position:

    0 timestamp  an aware local datetime, e.g. {timestamp:%Y-%m-%d %H:%M:%S}
    1 source     '<module> <function>' of the caller, or the logger name
    2 logger     the logger name
    3 level      the level name
    4 message    the formatted log message
    5 thrown     the exception and its traceback after a newline and one space, or ''
    6 thread     the thread name or id, see `thread_id_format`
    7 sequence   the record's sequence number (an int)

Some example formats:

    "{level}: {message} [{timestamp:%c}]"
        WARNING: warning message [Tue Mar 22 13:11:31 2011]

    "{0:%c} {1}\\n{3}: {4}{5}"
        Tue Mar 22 13:11:31 2011 my_module fatal
        ERROR: several message with an exception
         Traceback (most recent call last):
          ...
        ValueError: invalid argument
"""

import enum
import typing as ty
from dataclasses import dataclass
from datetime import datetime

from . import config
from .log import getLogger

logger = getLogger(__name__)

SLOT_NAMES = ("timestamp", "source", "logger", "level", "message", "thrown", "thread", "sequence")

DEFAULT_FORMAT = (
    "[{timestamp:%c}] [{sequence}] [{thread}] {logger} {source} {level}: {message}{thrown}"
)
DEFAULT_THREAD_ID_FORMAT = "name"

FORMAT = config.item("thds.linefmt.format", DEFAULT_FORMAT)
THREAD_ID_FORMAT = config.item("thds.linefmt.thread_id_format", DEFAULT_THREAD_ID_FORMAT)

_RENDER_ERRORS = (IndexError, KeyError, ValueError, TypeError, AttributeError)


class ThreadIdMode(enum.Enum):
    NAME = "name"
    ID = "id"


@dataclass(frozen=True)
class FormatConfig:
    template: str = DEFAULT_FORMAT
    thread_id_mode: ThreadIdMode = ThreadIdMode.NAME


def render(template: str, values: ty.Sequence[ty.Any]) -> str:
    """Substitutes the eight values into the template, positionally and by name."""
    return template.format(*values, **dict(zip(SLOT_NAMES, values)))


def is_valid_format(template: str) -> bool:
    try:
        render(template, (datetime.now().astimezone(), "", "", "", "", "", "", -(2**63)))
    except _RENDER_ERRORS:
        return False
    return True


def resolve_format(fmt: ty.Optional[str] = None) -> str:
    template = fmt if fmt is not None else FORMAT.lookup()
    if template is None:
        return DEFAULT_FORMAT
    if not is_valid_format(template):
        logger.debug("Ignoring invalid format %r; using the default format", template)
        return DEFAULT_FORMAT
    return template


def resolve_thread_id_mode(thread_id_format: ty.Optional[str] = None) -> ThreadIdMode:
    mode = thread_id_format if thread_id_format is not None else THREAD_ID_FORMAT()
    return ThreadIdMode.NAME if mode == ThreadIdMode.NAME.value else ThreadIdMode.ID


def resolve_config(
    fmt: ty.Optional[str] = None, thread_id_format: ty.Optional[str] = None
) -> FormatConfig:
    return FormatConfig(resolve_format(fmt), resolve_thread_id_mode(thread_id_format))
