"""Loggers for this library, and a ready-made `logging.config.dictConfig` that puts
the line formatter on the console.

```
from thds.linefmt import log

log.configure(thread_id_format="id")
log.getLogger("app").info("hello")
# [Mon Oct 19 10:01:16 2026] [0] [12345] app test_app my_function INFO: hello
```
"""

import logging
import logging.config
import typing as ty

from . import config, records

LOGLEVEL = config.item("thds.linefmt.log.level", logging.INFO, parse=logging.getLevelName)

FORMATTER_FACTORY = "thds.linefmt.formatter.ThdsLineFormatter"


def getLogger(name: ty.Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.level == logging.NOTSET:
        logger.setLevel(LOGLEVEL())
    return logger


def dict_config(
    level: ty.Union[int, str, None] = None,
    fmt: ty.Optional[str] = None,
    thread_id_format: ty.Optional[str] = None,
) -> ty.Dict[str, ty.Any]:
    """Everything goes to one console handler, formatted by ThdsLineFormatter.

    `fmt` and `thread_id_format` are only passed along when given, so that
    unset values still resolve through the environment and the config store.
    """
    formatter: ty.Dict[str, ty.Any] = {"()": FORMATTER_FACTORY}
    if fmt is not None:
        formatter["fmt"] = fmt
    if thread_id_format is not None:
        formatter["thread_id_format"] = thread_id_format
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"line": formatter},
        "handlers": {"console": {"class": "logging.StreamHandler", "formatter": "line"}},
        "root": {"handlers": ["console"], "level": LOGLEVEL() if level is None else level},
    }


def configure(
    level: ty.Union[int, str, None] = None,
    fmt: ty.Optional[str] = None,
    thread_id_format: ty.Optional[str] = None,
):
    records.install_record_factory()
    logging.config.dictConfig(dict_config(level, fmt=fmt, thread_id_format=thread_id_format))
