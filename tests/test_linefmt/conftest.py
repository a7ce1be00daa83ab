import logging
import typing as ty
import uuid
from pathlib import Path

import pytest

from thds.linefmt import config, records, settings, thread_names

_CONFIG_ITEMS = (settings.FORMAT, settings.THREAD_ID_FORMAT)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    for item in _CONFIG_ITEMS:
        item.clear_global()
        for name in (item.name, config.env_var_name(item.name)):
            monkeypatch.delenv(name, raising=False)
    yield
    for item in _CONFIG_ITEMS:
        item.clear_global()


@pytest.fixture(autouse=True)
def clear_thread_name_cache():
    thread_names.thread_local_cache().clear()
    yield
    thread_names.thread_local_cache().clear()


@pytest.fixture
def restore_record_factory() -> ty.Iterator[None]:
    orig = logging.getLogRecordFactory()
    yield
    logging.setLogRecordFactory(orig)


@pytest.fixture
def temp_file(tmp_path: Path) -> ty.Callable[[str, str], Path]:
    def make_temp_file(some_text: str, suffix: str = ".toml") -> Path:
        p = tmp_path / ("cfile-" + uuid.uuid4().hex + suffix)
        p.write_text(some_text)
        return p

    return make_temp_file


@pytest.fixture
def make_record() -> ty.Callable[..., logging.LogRecord]:
    """Builds a record the way the scenarios describe them: no caller information
    unless given, explicit thread id and sequence number.
    """

    def _make(
        msg: str = "hello",
        *,
        name: str = "app",
        level: int = logging.INFO,
        pathname: str = "(unknown file)",
        func: ty.Optional[str] = None,
        exc_info=None,
        created: ty.Optional[float] = 0.0,
        thread_id: ty.Optional[int] = 5,
        sequence_number: ty.Optional[int] = 1,
        args: tuple = (),
    ) -> logging.LogRecord:
        record = logging.LogRecord(name, level, pathname, 0, msg, args, exc_info, func=func)
        if created is not None:
            record.created = created
        setattr(record, records.NATIVE_THREAD_ID_ATTR, thread_id)
        setattr(record, records.SEQUENCE_NUMBER_ATTR, sequence_number)
        return record

    return _make
