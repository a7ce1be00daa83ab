"""Reading what the line formatter needs off a LogRecord.

The stdlib LogRecord has no sequence number and only carries the Python thread
`ident`, so we stamp a sequence number and the native thread id onto records,
either from a record factory or (for the sequence number) on first format.
"""

import itertools
import logging
import threading
import typing as ty

SEQUENCE_NUMBER_ATTR = "sequence_number"
NATIVE_THREAD_ID_ATTR = "native_thread_id"
SOURCE_CLASS_ATTR = "source_class"
SOURCE_METHOD_ATTR = "source_method"
# the last two can be passed per call via `extra=` to override what logging inferred.

_UNKNOWN_SOURCES = ("(unknown file)", "Unknown module")
_UNKNOWN_FUNCTION = "(unknown function)"

_SEQUENCE = itertools.count()
_SEQUENCE_LOCK = threading.Lock()


def next_sequence_number() -> int:
    with _SEQUENCE_LOCK:
        return next(_SEQUENCE)


def stamp(record: logging.LogRecord) -> logging.LogRecord:
    if getattr(record, SEQUENCE_NUMBER_ATTR, None) is None:
        setattr(record, SEQUENCE_NUMBER_ATTR, next_sequence_number())
    if getattr(record, NATIVE_THREAD_ID_ATTR, None) is None:
        setattr(record, NATIVE_THREAD_ID_ATTR, threading.get_native_id())
    return record


def _stamping_factory(
    wrapped: ty.Callable[..., logging.LogRecord]
) -> ty.Callable[..., logging.LogRecord]:
    def factory(*args, **kwargs) -> logging.LogRecord:
        return stamp(wrapped(*args, **kwargs))

    factory.wrapped = wrapped  # type: ignore[attr-defined]
    return factory


def install_record_factory():
    """Makes every LogRecord created from now on carry a sequence number and the
    native id of the thread that created it. Installing twice does nothing.
    """
    current = logging.getLogRecordFactory()
    if hasattr(current, "wrapped"):
        return
    logging.setLogRecordFactory(_stamping_factory(current))


def uninstall_record_factory():
    current = logging.getLogRecordFactory()
    wrapped = getattr(current, "wrapped", None)
    if wrapped is not None:
        logging.setLogRecordFactory(wrapped)


def sequence_number_of(record: logging.LogRecord) -> int:
    """Records that did not come through the factory get a number the first time
    they are asked for one, and keep it.
    """
    seq = getattr(record, SEQUENCE_NUMBER_ATTR, None)
    if seq is None:
        seq = next_sequence_number()
        setattr(record, SEQUENCE_NUMBER_ATTR, seq)
    return seq


def has_native_thread_id(record: logging.LogRecord) -> bool:
    return getattr(record, NATIVE_THREAD_ID_ATTR, None) is not None


def thread_id_of(record: logging.LogRecord) -> ty.Optional[int]:
    native_id = getattr(record, NATIVE_THREAD_ID_ATTR, None)
    if native_id is not None:
        return native_id
    return record.thread  # None when logging.logThreads is off


def source_class_of(record: logging.LogRecord) -> ty.Optional[str]:
    explicit = getattr(record, SOURCE_CLASS_ATTR, None)
    if explicit:
        return explicit
    if not record.module or record.module in _UNKNOWN_SOURCES:
        return None
    return record.module


def source_method_of(record: logging.LogRecord) -> ty.Optional[str]:
    explicit = getattr(record, SOURCE_METHOD_ATTR, None)
    if explicit:
        return explicit
    if not record.funcName or record.funcName == _UNKNOWN_FUNCTION:
        return None
    return record.funcName


def source_of(record: logging.LogRecord) -> str:
    """'<class> <method>', or just '<class>', or the logger name when the caller is unknown."""
    source_class = source_class_of(record)
    if source_class is None:
        return record.name
    source_method = source_method_of(record)
    if source_method is not None:
        return f"{source_class} {source_method}"
    return source_class
