"""
Configuration settings for the Scoop VirusTotal checker
Loads paths and timing from the .env file and the API key from a TOML file
"""

import os
from pathlib import Path
from typing import Optional

import tomli
from dotenv import dotenv_values

from constants import VT_REQUEST_TIMEOUT

# Load .env file ONLY (the Scoop root may also come from the OS environment)
_config_dir = Path(__file__).parent.resolve()
_env_file = _config_dir / ".env"
_dotenv_values = dotenv_values(_env_file) if _env_file.exists() else {}


def _get_env(key: str, default: Optional[str] = None) -> str:
    """Get value from .env file ONLY, not from OS environment variables"""
    return _dotenv_values.get(key, default) or default or ''


# Configuration file path
CONFIG_FILE = Path.home() / ".scoop_vt.toml"


def load_config():
    """
    Load configuration from TOML file

    Returns:
        Dictionary with configuration values, empty dict if the file is
        missing or cannot be parsed
    """
    if not CONFIG_FILE.exists():
        return {}

    try:
        with open(CONFIG_FILE, "rb") as f:
            return tomli.load(f)
    except (OSError, tomli.TOMLDecodeError):
        return {}


def get_virustotal_api_key():
    """
    Get VirusTotal API key from config file

    Returns:
        API key string or None if not configured
    """
    config = load_config()
    return config.get('virustotal', {}).get('apikey')


def get_scoop_root() -> Path:
    """Scoop install root: TOML [scoop] root, then .env SCOOP, then $SCOOP, then ~/scoop"""
    root = (
        load_config().get('scoop', {}).get('root')
        or _get_env('SCOOP')
        or os.environ.get('SCOOP')
    )
    if root:
        return Path(root).expanduser()
    return Path.home() / "scoop"


def get_buckets_dir() -> Path:
    """Directory holding the locally added buckets"""
    return get_scoop_root() / "buckets"


def get_request_timeout() -> float:
    """HTTP timeout in seconds, falling back to the default on bad values"""
    value = _get_env('VT_REQUEST_TIMEOUT')
    if not value:
        return VT_REQUEST_TIMEOUT
    try:
        return float(value)
    except ValueError:
        return VT_REQUEST_TIMEOUT


def is_verbose() -> bool:
    """Whether diagnostic [dim] output is enabled in .env"""
    return _get_env('VT_VERBOSE').strip().lower() in ('1', 'true', 'yes', 'on')
