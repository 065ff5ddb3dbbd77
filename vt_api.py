"""
VirusTotal API Module
Handles all HTTP interactions: hash lookups, redirect probing and URL
submission against the VirusTotal UI endpoints.
"""

from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import quote, urljoin

import requests
from rich.console import Console

from constants import (
    MAX_REDIRECTS, VT_FILE_LOOKUP_URL, VT_REQUEST_TIMEOUT, VT_URL_SUBMIT_URL,
    VT_USER_AGENT
)

console = Console()


class VTError(Exception):
    """Transport or parse failure while talking to VirusTotal"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class VTNotFoundError(VTError):
    """VirusTotal has no report for the requested hash (HTTP 404)"""


class RedirectLoopError(VTError):
    """Redirect chain did not settle within MAX_REDIRECTS hops"""


@dataclass(frozen=True)
class ScanStats:
    malicious: int
    suspicious: int
    undetected: int
    harmless: int = 0

    @property
    def unsafe(self) -> int:
        return self.malicious + self.suspicious

    @property
    def total(self) -> int:
        return self.malicious + self.suspicious + self.undetected + self.harmless


def _as_int(stats: Dict, key: str) -> int:
    value = stats.get(key, 0)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise VTError(f"Invalid value for {key}: {value!r}") from e


def parse_stats(data) -> ScanStats:
    """Extract data.attributes.last_analysis_stats from a file report"""
    try:
        stats = data['data']['attributes']['last_analysis_stats']
    except (KeyError, TypeError) as e:
        raise VTError(f"Malformed VirusTotal response: missing {e}") from e

    if not isinstance(stats, dict):
        raise VTError("Malformed VirusTotal response: last_analysis_stats is not an object")

    return ScanStats(
        malicious=_as_int(stats, 'malicious'),
        suspicious=_as_int(stats, 'suspicious'),
        undetected=_as_int(stats, 'undetected'),
        harmless=_as_int(stats, 'harmless'),
    )


class VTClient:
    """Thin blocking client over a single requests.Session"""

    def __init__(self, api_key: Optional[str] = None,
                 timeout: float = VT_REQUEST_TIMEOUT,
                 session: Optional[requests.Session] = None,
                 verbose: bool = False):
        self.timeout = timeout
        self.verbose = verbose
        self.session = session or requests.Session()
        self.api_key = api_key
        self.session.headers.update({'User-Agent': VT_USER_AGENT})

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        self.session.close()

    def _debug(self, message: str):
        if self.verbose:
            console.print(f"[dim]{message}[/dim]")

    def _vt_headers(self) -> Dict[str, str]:
        """Per-request headers for VirusTotal calls only; never sent to download hosts"""
        if self.api_key:
            return {'x-apikey': self.api_key}
        return {}

    def lookup_hash(self, hash_value: str) -> ScanStats:
        """
        Fetch the last analysis stats for a file hash

        Raises:
            VTNotFoundError: VirusTotal does not know the hash
            VTError: any other transport or parse failure
        """
        url = VT_FILE_LOOKUP_URL.format(hash=quote(hash_value.lower(), safe=''))
        self._debug(f"GET {url}")

        try:
            response = self.session.get(url, headers=self._vt_headers(),
                                        timeout=self.timeout)
        except requests.RequestException as e:
            raise VTError(f"Request failed: {e}") from e

        self._debug(f"VT return code: {response.status_code}")

        if response.status_code == 404:
            raise VTNotFoundError("File not found on VirusTotal", status_code=404)
        if response.status_code != 200:
            raise VTError(f"VirusTotal returned status {response.status_code}",
                          status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise VTError(f"JSON parse error: {e}") from e

        return parse_stats(data)

    def resolve_redirect(self, url: str) -> str:
        """One hop: the Location of a redirect response, else url unchanged"""
        try:
            response = self.session.get(url, allow_redirects=False, stream=True,
                                        timeout=self.timeout)
        except requests.RequestException as e:
            raise VTError(f"Could not reach {url}: {e}") from e

        try:
            if response.is_redirect:
                location = urljoin(url, response.headers['location'])
                self._debug(f"{response.status_code} {url} -> {location}")
                return location
            return url
        finally:
            response.close()

    def resolve_final_url(self, url: str, max_redirects: int = MAX_REDIRECTS) -> str:
        """Follow redirects one hop at a time until the URL stops changing"""
        for _ in range(max_redirects + 1):
            next_url = self.resolve_redirect(url)
            if next_url == url:
                return url
            url = next_url
        raise RedirectLoopError(f"More than {max_redirects} redirects, last URL: {url}")

    def submit_url(self, url: str) -> Optional[str]:
        """
        Submit a download URL for scanning

        Returns:
            Analysis id from the acknowledgement, if the response carries one
        """
        self._debug(f"POST {VT_URL_SUBMIT_URL}?url={url}")

        try:
            response = self.session.post(VT_URL_SUBMIT_URL, params={'url': url},
                                         headers=self._vt_headers(),
                                         timeout=self.timeout)
        except requests.RequestException as e:
            raise VTError(f"Submission failed: {e}") from e

        self._debug(f"VT return code: {response.status_code}")

        if not 200 <= response.status_code < 300:
            raise VTError(f"VirusTotal returned status {response.status_code}",
                          status_code=response.status_code)

        try:
            data = response.json()
        except ValueError:
            return None
        if isinstance(data, dict) and isinstance(data.get('data'), dict):
            return data['data'].get('id')
        return None
