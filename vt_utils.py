"""
VirusTotal Utilities Module
Contains hash token parsing, URL helpers and report formatting.
"""

import hashlib
import re
from typing import Tuple

from constants import (
    DEFAULT_ALGORITHM, SUPPORTED_ALGORITHMS, VT_FILE_REPORT_URL,
    VT_URL_REPORT_URL
)

_HASH_LENGTHS = {"md5": 32, "sha1": 40, "sha256": 64}
_HEX_RE = re.compile(r'^[0-9a-fA-F]+\Z')


def split_hash(token: str) -> Tuple[str, str]:
    """Split an 'algo:hexhash' token; bare hashes default to sha256"""
    token = token.strip()
    if ':' in token:
        algorithm, value = token.split(':', 1)
        return algorithm.strip().lower(), value.strip()
    return DEFAULT_ALGORITHM, token


def is_supported_algorithm(algorithm: str) -> bool:
    """Check if VirusTotal can look up hashes of this algorithm"""
    return algorithm.lower() in SUPPORTED_ALGORITHMS


def validate_hash(hash_string: str, algorithm: str = DEFAULT_ALGORITHM) -> bool:
    """Validate a hex digest against the expected length for its algorithm"""
    expected = _HASH_LENGTHS.get(algorithm.lower())
    if expected is None or len(hash_string) != expected:
        return False
    return bool(_HEX_RE.match(hash_string))


def strip_url_fragment(url: str) -> str:
    """Drop a '#/newname' rename suffix from a manifest URL"""
    return url.split('#', 1)[0]


def file_report_url(hash_value: str) -> str:
    return VT_FILE_REPORT_URL.format(hash=hash_value.lower())


def url_report_url(url: str) -> str:
    """Report link for a submitted URL; VirusTotal ids URLs by their SHA-256"""
    url_id = hashlib.sha256(url.encode('utf-8')).hexdigest()
    return VT_URL_REPORT_URL.format(id=url_id)


def format_detection(unsafe: int, total: int) -> str:
    """Format detections as 'unsafe/total'"""
    return f"{unsafe}/{total}"
