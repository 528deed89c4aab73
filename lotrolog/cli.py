"""
LOTRO combat log parser - command line entry point
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import Config, ConfigError
from .errors import PatternError
from .events import resolve_self
from .parse import LogParser
from .report import ParseReport


def setup_logging(debug: bool = False, log_file: Optional[str] = None,
                  level: str = 'INFO') -> None:
    """Configure logging based on debug flag and config.

    Args:
        debug: Enable debug logging
        log_file: Optional log file path
        level: Log level name used when debug is off
    """
    if debug:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, str(level).upper(), logging.INFO)

    # Configure logging format
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Console handler; stdout carries the summary and events
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)

    # File handler (if specified)
    handlers = [console_handler]
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
        except OSError as e:
            logging.warning(f"Could not create log file {log_file}: {e}")

    # Configure root logger
    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        force=True  # Override any existing configuration
    )


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the command line argument parser."""
    parser = argparse.ArgumentParser(
        prog='lotrolog',
        description='Parse a LOTRO combat log and report the lines that could not be parsed',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lotrolog Combat_20240708.txt                  # Print the parse summary
  lotrolog Combat_20240708.txt --json           # Also print every event as JSON
  lotrolog Combat_20240708.txt --player Bob     # Name the player behind "you"
  lotrolog Combat_20240708.txt --config my.yml  # Use custom config file
        """
    )
    parser.add_argument(
        'log_file',
        help='Combat log file to parse'
    )
    parser.add_argument(
        '--config',
        type=str,
        help='Path to config file (defaults built in)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--max-failures',
        type=int,
        help='Number of failing lines to show (default from config)'
    )
    parser.add_argument(
        '--player',
        type=str,
        help='Name of the player who recorded the log'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print each parsed event as a JSON line'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'lotrolog v{__version__}'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = build_arg_parser().parse_args(argv)

    try:
        config = Config(args.config)
    except ConfigError as e:
        setup_logging(args.debug)
        logging.error(f"Configuration error: {e}")
        return 1

    logging_config = config.get_logging_config()
    setup_logging(args.debug, logging_config.get('file'), logging_config.get('level', 'INFO'))
    logger = logging.getLogger(__name__)

    if args.max_failures is not None and args.max_failures < 0:
        logger.error("--max-failures must not be negative")
        return 1
    if args.player is not None and not args.player.strip():
        logger.error("--player must be a non-empty name")
        return 1
    max_failures = args.max_failures
    if max_failures is None:
        max_failures = config.get('report.max_failure_samples', 10)

    try:
        parser = LogParser.from_config(config)
    except PatternError as e:
        logger.error(f"Pattern error: {e}")
        return 1

    report = ParseReport()
    try:
        events = parser.parse_file(args.log_file, report)
    except OSError as e:
        logger.error(f"Error reading file {args.log_file}: {e}")
        return 1

    if args.json:
        for event in events:
            if args.player:
                event = resolve_self(event, args.player)
            print(json.dumps(event.to_dict()))

    for line in report.summary_lines(max_failures):
        print(line)

    logger.info(f"Parsed {report.parsed_lines}/{report.total_lines} lines "
                f"({report.success_rate:.1%}), errors by category: {report.error_counts}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
