#!/usr/bin/env python3
"""
Scoop VirusTotal checker - Main Entry Point
Parses options, loads configuration and runs the per-app checks
"""

import argparse
import sys
from typing import List, Optional

from rich.console import Console

from config import get_buckets_dir, get_request_timeout, get_virustotal_api_key, is_verbose
from constants import ARCHITECTURES, EXIT_USAGE
from manifest import default_architecture
from vt_api import VTClient
from vt_scanner import VirusTotalChecker

console = Console()
error_console = Console(stderr=True)


class UsageArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with EXIT_USAGE on bad arguments"""

    def error(self, message):
        self.print_usage(sys.stderr)
        error_console.print(f"[red]{self.prog}: error: {message}[/red]")
        sys.exit(EXIT_USAGE)


def build_parser() -> argparse.ArgumentParser:
    parser = UsageArgumentParser(
        prog="scoop-vt",
        description="Look for app's hash on virustotal.com",
        epilog="Exit codes: 0 no problems, 2 at least one package was marked "
               "unsafe by VirusTotal, 4 at least one exception was raised while "
               "looking for info, 8 at least one package couldn't be queried "
               "(manifest or hash not available). Codes are OR-combined.",
    )
    parser.add_argument('apps', nargs='+', metavar='app',
                        help="App name, bucket/app, manifest path or manifest URL")
    parser.add_argument('-a', '--arch', choices=ARCHITECTURES,
                        default=default_architecture(),
                        help="Use the specified architecture, if the app supports it")
    parser.add_argument('-s', '--scan', action='store_true',
                        help="For packages where VirusTotal has no information, "
                             "send the download URL for analysis")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Print request and resolution details")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse argv, accepting a leading 'virustotal' subcommand word"""
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] == 'virustotal':
        args = args[1:]
    return build_parser().parse_args(args)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point; returns the combined exit code"""
    args = parse_args(argv)
    verbose = args.verbose or is_verbose()

    buckets_dir = get_buckets_dir()
    if verbose:
        console.print(f"[dim]Buckets directory: {buckets_dir}[/dim]")
        console.print(f"[dim]Architecture: {args.arch}[/dim]")

    try:
        with VTClient(api_key=get_virustotal_api_key(),
                      timeout=get_request_timeout(),
                      verbose=verbose) as client:
            checker = VirusTotalChecker(client, buckets_dir, args.arch,
                                        scan=args.scan, verbose=verbose)
            return checker.run(args.apps)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130


if __name__ == "__main__":
    sys.exit(main())
