import io
import logging
import logging.config

import pytest

from thds.linefmt import log
from thds.linefmt.formatter import ThdsLineFormatter
from thds.linefmt.settings import ThreadIdMode


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_dict_config_leaves_unset_values_out():
    cfg = log.dict_config()
    assert cfg["formatters"]["line"] == {"()": "thds.linefmt.formatter.ThdsLineFormatter"}
    assert cfg["root"]["level"] == logging.INFO


def test_dict_config_is_accepted(restore_root_logger):
    logging.config.dictConfig(
        log.dict_config("DEBUG", fmt="{level} {message}", thread_id_format="id")
    )
    handler = restore_root_logger.handlers[-1]
    assert isinstance(handler.formatter, ThdsLineFormatter)
    assert handler.formatter.config.template == "{level} {message}"
    assert handler.formatter.config.thread_id_mode is ThreadIdMode.ID
    assert restore_root_logger.level == logging.DEBUG


def test_configure_end_to_end(restore_root_logger, restore_record_factory):
    log.configure(logging.INFO, fmt="{sequence}|{logger}|{source}|{level}|{message}")
    stream = io.StringIO()
    restore_root_logger.handlers[-1].setStream(stream)

    def do_the_logging():
        logging.getLogger("test_log.e2e").info("first %s", "line")
        logging.getLogger("test_log.e2e").info("second")

    do_the_logging()
    first, second = stream.getvalue().splitlines()
    seq1, rest1 = first.split("|", 1)
    seq2, rest2 = second.split("|", 1)
    assert int(seq2) > int(seq1)
    assert rest1 == "test_log.e2e|test_log do_the_logging|INFO|first line"
    assert rest2 == "test_log.e2e|test_log do_the_logging|INFO|second"


def test_get_logger_uses_configured_level():
    with log.LOGLEVEL.set_local("WARNING"):
        logger = log.getLogger("test_log.leveled")
    assert logger.level == logging.WARNING
