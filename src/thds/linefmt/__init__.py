"""A one-or-two line LogRecord formatter with configurable templates and thread names."""

from importlib.metadata import PackageNotFoundError, version

from . import config, formatter, log, records, settings, thread_names  # noqa: F401
from .formatter import ThdsLineFormatter  # noqa: F401
from .records import install_record_factory  # noqa: F401
from .settings import DEFAULT_FORMAT, FormatConfig, ThreadIdMode, resolve_config  # noqa: F401
from .thread_names import resolve_thread_name  # noqa: F401

try:
    __version__ = version("thds.linefmt")
except PackageNotFoundError:  # running from a source checkout
    __version__ = ""
