"""flightdata command-line tool."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import RocketConfig, load_config
from .csv_writer import write_csv
from .decoder import PacketParser
from .errors import ConfigError, PacketError
from .report import Report, column_stats
from .table import ErrorPolicy, TableGenerator

logger = logging.getLogger(__name__)


def _load(path: str) -> RocketConfig:
    try:
        return load_config(path)
    except (OSError, ConfigError) as e:
        logger.error("could not load config: %s", e)
        sys.exit(1)


def _policy(args: argparse.Namespace) -> ErrorPolicy:
    return ErrorPolicy.CONTINUE if args.keep_going else ErrorPolicy.ABORT


def cmd_check(args: argparse.Namespace) -> None:
    """Print a configuration summary and whether it is valid."""
    try:
        config = RocketConfig.from_json(Path(args.config).read_text(encoding="utf-8"))
    except (OSError, ConfigError) as e:
        logger.error("could not load config: %s", e)
        sys.exit(1)

    print("Loaded config:")
    print(f"  name: {config.name}")
    if config.display_name:
        print(f"  display name: {config.display_name}")
    print(f"  sensors: {len(config.sensors)}")
    print(f"  endianess: {config.endianess.value}")
    print()

    valid = True
    try:
        config.validate()
    except ConfigError as e:
        valid = False
        print(f"Rocket invalid: {e}")
    else:
        print("Configuration is valid!")

    print()
    print("Sensors:")
    for s in config.sensors:
        print(f"  [{s.id:3d}] {s.name}  ({s.payload_size + 1} bytes/packet)")
        for v in s.values:
            print(f"        {v.name:20s} {v.data_type.tag}")

    if not valid:
        sys.exit(1)


def cmd_convert(args: argparse.Namespace) -> None:
    """Convert a flight computer dump to CSV or a LaTeX report."""
    config = _load(args.config)

    with PacketParser.from_path(args.data, config) as parser:
        table = TableGenerator(parser, config, on_error=_policy(args))
        if args.columns:
            try:
                table.allow_columns(c.strip() for c in args.columns.split(","))
            except KeyError as e:
                logger.error("%s", e.args[0])
                sys.exit(1)

        with open(args.output, "w", newline="", encoding="utf-8") as out:
            try:
                if args.to == "csv":
                    rows = write_csv(table, out)
                    logger.info("wrote %d rows to %s", rows, args.output)
                else:
                    Report.from_table(config, table).write(out)
                    logger.info("wrote report to %s", args.output)
            except PacketError as e:
                logger.error("error while parsing packet at byte %d: %s",
                             parser.packet_offset, e)
                sys.exit(1)

    if table.errors:
        logger.warning("%d packets skipped", table.errors)


def cmd_dump(args: argparse.Namespace) -> None:
    """Print every decoded packet."""
    config = _load(args.config)
    names = {s.id: s for s in config.sensors}

    with PacketParser.from_path(args.data, config) as parser:
        while True:
            try:
                packet = next(parser)
            except StopIteration:
                break
            except PacketError as e:
                logger.error("@%d: %s", parser.packet_offset, e)
                if not args.keep_going:
                    sys.exit(1)
                continue
            sensor = names[packet.id]
            fields_str = ", ".join(f"{v.name}={val}"
                                   for v, val in zip(sensor.values, packet.values))
            print(f"[{parser.packet_offset:10d}] {sensor.name}: {fields_str}")


def cmd_info(args: argparse.Namespace) -> None:
    """Print per-column sample count, minimum and maximum."""
    config = _load(args.config)

    with PacketParser.from_path(args.data, config) as parser:
        table = TableGenerator(parser, config, on_error=_policy(args))
        columns = table.column_names()
        try:
            stats = column_stats(columns, table.rows())
        except PacketError as e:
            logger.error("error while parsing packet at byte %d: %s",
                         parser.packet_offset, e)
            sys.exit(1)
        size = parser.offset

    print(f"Rocket:  {config.title}")
    print(f"File:    {args.data}")
    print(f"Size:    {size:,} bytes")
    if table.errors:
        print(f"Skipped: {table.errors} packets")

    print(f"\nColumns ({len(columns)}):")
    print(f"  {'Name':<32s}  {'Samples':>8s}  {'Min':>20s}  {'Max':>20s}")
    for name in columns:
        s = stats.get(name)
        if s is None:
            print(f"  {name:<32s}  {0:8d}  {'-':>20s}  {'-':>20s}")
        else:
            print(f"  {name:<32s}  {s.count:8,}  {str(s.min):>20s}  {str(s.max):>20s}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="flightdata",
                                     description="flight computer data tool")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log every decoded packet")
    sub = parser.add_subparsers(dest="command")

    # check
    p_check = sub.add_parser("check", help="Validate a rocket config")
    p_check.add_argument("-c", "--config", required=True, help="Rocket config JSON")

    # convert
    p_convert = sub.add_parser("convert", help="Convert a data file")
    p_convert.add_argument("-c", "--config", required=True, help="Rocket config JSON")
    p_convert.add_argument("-t", "--to", choices=["csv", "latex"], default="csv",
                           help="Output format")
    p_convert.add_argument("--columns", help="Comma separated columns to keep")
    p_convert.add_argument("-k", "--keep-going", action="store_true",
                           help="Skip bad packets instead of stopping")
    p_convert.add_argument("data", help="Encoded file from the flight computer")
    p_convert.add_argument("output", help="Where to write the decoded data")

    # dump
    p_dump = sub.add_parser("dump", help="Print decoded packets")
    p_dump.add_argument("-c", "--config", required=True, help="Rocket config JSON")
    p_dump.add_argument("-k", "--keep-going", action="store_true",
                        help="Skip bad packets instead of stopping")
    p_dump.add_argument("data", help="Encoded file from the flight computer")

    # info
    p_info = sub.add_parser("info", help="Show per-column statistics")
    p_info.add_argument("-c", "--config", required=True, help="Rocket config JSON")
    p_info.add_argument("-k", "--keep-going", action="store_true",
                        help="Skip bad packets instead of stopping")
    p_info.add_argument("data", help="Encoded file from the flight computer")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(name)s: %(message)s")

    if args.command == "check":
        cmd_check(args)
    elif args.command == "convert":
        cmd_convert(args)
    elif args.command == "dump":
        cmd_dump(args)
    elif args.command == "info":
        cmd_info(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
