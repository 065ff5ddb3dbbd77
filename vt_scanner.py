"""
VirusTotal Scanner Module
Checks the hashes declared in app manifests against VirusTotal and
accumulates the bitmask exit code.
"""

from pathlib import Path
from typing import Iterable, Optional

import requests
from rich.console import Console

from constants import (
    EXIT_EXCEPTION, EXIT_NO_INFO, EXIT_SUCCESS, EXIT_UNSAFE, VT_MANUAL_SUBMIT_URL
)
from manifest import find_manifest, hash_for, pairs, url_for
from vt_api import VTClient, VTError, VTNotFoundError
from vt_utils import (
    file_report_url, format_detection, is_supported_algorithm, split_hash,
    strip_url_fragment, url_report_url, validate_hash
)

console = Console()


class VirusTotalChecker:
    """Runs the per-app, per-hash VirusTotal checks"""

    def __init__(self, client: VTClient, buckets_dir: Path, arch: str,
                 scan: bool = False, verbose: bool = False):
        """
        Args:
            client: VirusTotal HTTP client
            buckets_dir: Directory holding local Scoop buckets
            arch: '32bit' or '64bit'
            scan: Submit download URLs of files VirusTotal does not know
            verbose: Print [dim] diagnostics
        """
        self.client = client
        self.buckets_dir = buckets_dir
        self.arch = arch
        self.scan = scan
        self.verbose = verbose

    def _debug(self, message: str):
        if self.verbose:
            console.print(f"[dim]{message}[/dim]")

    def check_hash(self, app: str, token: str) -> int:
        """
        Look up one hash token and report the verdict

        Returns:
            EXIT_UNSAFE, EXIT_NO_INFO or EXIT_SUCCESS

        Raises:
            VTError: lookup failed (VTNotFoundError when VirusTotal has no report)
        """
        algorithm, hash_value = split_hash(token)
        if not is_supported_algorithm(algorithm):
            console.print(f"[yellow]{app}: unsupported hash {algorithm}. "
                          f"Will not search VirusTotal.[/yellow]")
            return EXIT_NO_INFO

        if not validate_hash(hash_value, algorithm):
            self._debug(f"{app}: {hash_value} does not look like a {algorithm} digest")

        stats = self.client.lookup_hash(hash_value)
        report = file_report_url(hash_value)
        detection = format_detection(stats.unsafe, stats.total)

        if stats.unsafe > 0:
            console.print(f"[red]{app}: {detection}, see {report}[/red]")
            return EXIT_UNSAFE

        console.print(f"[green]{app}: {detection}, see {report}[/green]")
        return EXIT_SUCCESS

    def submit_on_miss(self, app: str, url: Optional[str]) -> bool:
        """
        Submit an unknown download URL for scanning. Never raises.

        Returns:
            True if VirusTotal acknowledged the submission
        """
        submitted = False
        final_url = None

        if url:
            try:
                final_url = self.client.resolve_final_url(strip_url_fragment(url))
                self.client.submit_url(final_url)
                submitted = True
            except (VTError, requests.RequestException) as e:
                self._debug(f"{app}: submission failed: {e}")

        if submitted:
            console.print(f"[cyan]{app}: sent for analysis, see "
                          f"{url_report_url(final_url)}[/cyan]")
        else:
            self._print_manual_hint(app, url)
        return submitted

    def _print_manual_hint(self, app: str, url: Optional[str]):
        if url:
            console.print(f"[yellow]{app}: not submitted. You can submit "
                          f"{strip_url_fragment(url)} manually at "
                          f"{VT_MANUAL_SUBMIT_URL}[/yellow]")
        else:
            console.print(f"[yellow]{app}: no download URL to submit[/yellow]")

    def check_app(self, app: str) -> int:
        """Check every hash of one app; returns the OR of its exit flags"""
        manifest, bucket = find_manifest(app, self.buckets_dir)
        if manifest is None:
            console.print(f"[yellow]{app}: manifest not found[/yellow]")
            return EXIT_NO_INFO

        self._debug(f"{app}: using manifest from bucket {bucket or '(direct)'}")

        hashes = hash_for(manifest, self.arch)
        if hashes is None:
            console.print(f"[yellow]{app}: no hash in manifest for {self.arch}[/yellow]")
            return EXIT_NO_INFO

        exit_code = EXIT_SUCCESS
        for hash_token, url in pairs(hashes, url_for(manifest, self.arch)):
            try:
                exit_code |= self.check_hash(app, hash_token)
            except VTNotFoundError:
                exit_code |= EXIT_EXCEPTION
                console.print(f"[yellow]{app}: not found on VirusTotal[/yellow]")
                if self.scan:
                    self.submit_on_miss(app, url)
                else:
                    self._print_manual_hint(app, url)
            except VTError as e:
                exit_code |= EXIT_EXCEPTION
                console.print(f"[red]{app}: an error occurred while retrieving "
                              f"data from VirusTotal: {e}[/red]")
        return exit_code

    def run(self, apps: Iterable[str]) -> int:
        """Check apps in order; returns the combined exit code"""
        exit_code = EXIT_SUCCESS
        for app in apps:
            exit_code |= self.check_app(app)
        return exit_code
