"""
Command-line interface for lsx.

This module provides the command-line interface for the lsx utility.
"""

import argparse
import datetime
import json
import os
import sys
import threading
import traceback
from typing import Any, Dict, List, Optional

from lsx.config import Config, ConfigValidationError
from lsx.expand import PatternError
from lsx.lister import Lister, ListingCancelled
from lsx.options import Options

# Exit codes
EXIT_OK = 0
EXIT_ERRORS = 1
EXIT_USAGE = 2
EXIT_TIMEOUT = 124
EXIT_INTERRUPTED = 130  # 128 + SIGINT


def parse_args(args: List[str]) -> argparse.Namespace:
    """Parse command-line arguments.

    Listing flags default to None so that only flags given on the command
    line override the configured defaults.

    Args:
        args: Command-line arguments.

    Returns:
        argparse.Namespace: Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        prog="lsx",
        description="List directory contents",
        add_help=False,  # -h means human-readable sizes, as in ls
    )

    parser.add_argument(
        "--help",
        action="help",
        help="Show this help message and exit"
    )

    # Listing options
    parser.add_argument(
        "-l",
        dest="long_format",
        action="store_true",
        default=None,
        help="Use a long listing format"
    )
    parser.add_argument(
        "-a", "--all",
        dest="all_files",
        action="store_true",
        default=None,
        help="Do not ignore entries starting with ."
    )
    parser.add_argument(
        "-h", "--human-readable",
        dest="human_readable",
        action="store_true",
        default=None,
        help="With -l, print sizes like 1.5K and 2.0M"
    )
    parser.add_argument(
        "-R", "--recursive",
        dest="recursive",
        action="store_true",
        default=None,
        help="List subdirectories recursively"
    )
    parser.add_argument(
        "-r", "--reverse",
        dest="reverse",
        action="store_true",
        default=None,
        help="Reverse order while sorting"
    )

    # Sort selection
    sort_group = parser.add_mutually_exclusive_group()
    sort_group.add_argument(
        "-t",
        dest="sort_by",
        action="store_const",
        const="time",
        help="Sort by modification time, newest first"
    )
    sort_group.add_argument(
        "-S",
        dest="sort_by",
        action="store_const",
        const="size",
        help="Sort by file size, largest first"
    )
    sort_group.add_argument(
        "--sort",
        dest="sort_by",
        choices=["name", "time", "size"],
        help="Sort by name, time or size"
    )

    parser.add_argument(
        "--no-expand",
        dest="expand_patterns",
        action="store_const",
        const=False,
        default=None,
        help="Do not expand braces and globs in arguments"
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        help="With -R, do not descend more than this many levels"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Abort the listing after this many seconds"
    )

    # Configuration file
    parser.add_argument(
        "--config",
        help="Path to configuration file"
    )

    # Initialize configuration
    parser.add_argument(
        "--init",
        action="store_true",
        help="Initialize a new configuration file"
    )

    # Log file
    parser.add_argument(
        "--log-file",
        help="Path to file for logging listing runs"
    )

    # Verbose mode
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Verbose mode (-v for resolved options, -vv for stack traces)"
    )

    # Version
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information"
    )

    # Patterns (positional arguments)
    parser.add_argument(
        "patterns",
        nargs="*",
        help="Files, directories, globs or brace patterns to list"
    )

    return parser.parse_args(args)


def build_options(config: Config, args: argparse.Namespace) -> Options:
    """Merge command-line flags over the configured defaults."""
    return config.to_options(
        long_format=args.long_format,
        all_files=args.all_files,
        human_readable=args.human_readable,
        recursive=args.recursive,
        reverse=args.reverse,
        sort_by=args.sort_by,
        expand_patterns=args.expand_patterns,
        max_depth=args.max_depth,
    )


def options_to_dict(options: Optional[Options]) -> Optional[Dict[str, Any]]:
    """Convert options to a JSON-serializable dict."""
    if options is None:
        return None
    values = options._asdict()
    values["sort_by"] = options.sort_by.value
    return values


def run_listing(
    options: Options,
    patterns: List[str],
    timeout: Optional[float] = None,
) -> int:
    """Run one listing, optionally bounded by a timeout.

    Returns:
        int: Number of reported errors.

    Raises:
        ListingCancelled: If the timeout expired before the listing finished.
    """
    cancel = threading.Event()
    timer = None
    if timeout is not None:
        timer = threading.Timer(timeout, cancel.set)
        timer.daemon = True
        timer.start()

    try:
        lister = Lister(options, stdout=sys.stdout, stderr=sys.stderr, cancel=cancel)
        return lister.run(patterns)
    finally:
        if timer:
            timer.cancel()


def log(
    log_file: Optional[str],
    patterns: List[str],
    options: Optional[Options],
    errors: int,
    status: int,
) -> None:
    """Append a JSON record of one run to the log file."""
    if not log_file:
        return

    log_entry = {
        "timestamp": datetime.datetime.now().isoformat(),
        "cwd": os.getcwd(),
        "patterns": patterns,
        "options": options_to_dict(options),
        "errors": errors,
        "status": status,
    }

    try:
        # Create directory if it doesn't exist
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        with open(log_file, "a") as f:
            f.write(json.dumps(log_entry, indent=2) + "\n")
    except OSError as e:
        print(f"Error writing to log file: {str(e)}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments. Defaults to ``sys.argv[1:]``.

    Returns:
        int: Exit code.
    """
    args = parse_args(sys.argv[1:] if argv is None else argv)

    if args.init:
        Config.create_default_config()
        return EXIT_OK

    # Show version and exit
    if args.version:
        from lsx import __version__
        print(f"lsx version {__version__}")
        return EXIT_OK

    options = None
    errors = 0

    try:
        config = Config(args.config)
        if args.config and not config.config_file_found:
            print(f"Note: configuration file {args.config} not found, using defaults.", file=sys.stderr)

        options = build_options(config, args)
        if args.verbose > 0:
            print(f"Options: {json.dumps(options_to_dict(options))}", file=sys.stderr)

        errors = run_listing(options, args.patterns, timeout=args.timeout)
        status = EXIT_ERRORS if errors else EXIT_OK
    except PatternError as e:
        print(f"ls: {str(e)}", file=sys.stderr)
        status = EXIT_USAGE
    except ListingCancelled:
        sys.stdout.flush()
        if args.verbose > 0:
            print(f"Listing cancelled after {args.timeout}s", file=sys.stderr)
        status = EXIT_TIMEOUT
    except ConfigValidationError as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        status = EXIT_ERRORS
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        status = EXIT_INTERRUPTED
    except Exception as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        if args.verbose > 1:  # Show stack trace in double verbose mode
            traceback.print_exc(file=sys.stderr)
        status = EXIT_ERRORS

    log(args.log_file, args.patterns, options, errors, status)
    return status


if __name__ == "__main__":
    sys.exit(main())
