"""Shows which format the line formatter would use here, and what a line looks like."""

import argparse
import logging
import typing as ty
from pprint import pprint

from . import config, records
from .formatter import ThdsLineFormatter


def sample_record(message: str) -> logging.LogRecord:
    record = logging.LogRecord(
        "thds.linefmt.cli", logging.INFO, __file__, 0, message, (), None, func="main"
    )
    return records.stamp(record)


def main(argv: ty.Optional[ty.Sequence[str]] = None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config-file", help="A .toml or .json file to load into the config store."
    )
    parser.add_argument("--format", dest="fmt", help="A template that overrides all other config.")
    parser.add_argument("--thread-id-format", choices=("name", "id"))
    parser.add_argument("--sample", default="a sample message", help="The message to format.")
    args = parser.parse_args(argv)

    if args.config_file:
        config.load_config_file(args.config_file)

    formatter = ThdsLineFormatter(args.fmt, args.thread_id_format)
    pprint(formatter.config)
    pprint(config.show_all_config())
    print(formatter.format(sample_record(args.sample)))
