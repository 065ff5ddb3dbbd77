"""
Manifest Module
Locates Scoop app manifests in local buckets and reads their hash and URL
fields for a given architecture.
"""

import json
import platform
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

import requests
from rich.console import Console

from config import get_request_timeout
from constants import ARCHITECTURES, DEFAULT_BUCKET

console = Console()


@dataclass(frozen=True)
class SingleHash:
    value: str


@dataclass(frozen=True)
class HashList:
    values: Tuple[str, ...]


@dataclass(frozen=True)
class SingleUrl:
    value: str


@dataclass(frozen=True)
class UrlList:
    values: Tuple[str, ...]


HashSpec = Union[SingleHash, HashList]
UrlSpec = Union[SingleUrl, UrlList]


def default_architecture() -> str:
    """64bit on 64-bit interpreters, 32bit otherwise"""
    if sys.maxsize > 2 ** 32 or platform.machine().endswith('64'):
        return "64bit"
    return "32bit"


def _read_manifest_file(path: Path) -> Optional[Dict]:
    try:
        with open(path, 'r', encoding='utf-8-sig') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        console.print(f"[red]Could not read manifest {path}: {e}[/red]")
        return None

    if not isinstance(data, dict):
        console.print(f"[red]Manifest {path} is not a JSON object[/red]")
        return None
    return data


def _fetch_manifest_url(url: str) -> Optional[Dict]:
    try:
        response = requests.get(url, timeout=get_request_timeout())
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        console.print(f"[red]Could not download manifest {url}: {e}[/red]")
        return None

    if not isinstance(data, dict):
        console.print(f"[red]Manifest {url} is not a JSON object[/red]")
        return None
    return data


def list_buckets(buckets_dir: Path) -> List[str]:
    """Bucket names under buckets_dir, 'main' first then alphabetical"""
    if not buckets_dir.is_dir():
        return []
    names = sorted(p.name for p in buckets_dir.iterdir() if p.is_dir())
    if DEFAULT_BUCKET in names:
        names.remove(DEFAULT_BUCKET)
        names.insert(0, DEFAULT_BUCKET)
    return names


def manifest_path(app: str, bucket: str, buckets_dir: Path) -> Optional[Path]:
    """Path of app's manifest inside bucket, preferring the bucket/ subdirectory"""
    bucket_root = buckets_dir / bucket
    for candidate in (bucket_root / "bucket" / f"{app}.json", bucket_root / f"{app}.json"):
        if candidate.is_file():
            return candidate
    return None


def find_manifest(app: str, buckets_dir: Path) -> Tuple[Optional[Dict], Optional[str]]:
    """
    Resolve an app reference to its manifest

    Args:
        app: 'name', 'bucket/name', a path to a .json file or a manifest URL
        buckets_dir: Directory holding local buckets

    Returns:
        (manifest, bucket); manifest is None when nothing matches
    """
    if app.startswith(('http://', 'https://')):
        return _fetch_manifest_url(app), None

    if app.lower().endswith('.json'):
        path = Path(app).expanduser()
        if path.is_file():
            return _read_manifest_file(path), None
        return None, None

    if '/' in app:
        bucket, name = app.split('/', 1)
        buckets = [bucket]
    else:
        name = app
        buckets = list_buckets(buckets_dir)

    name = name.lower()
    for bucket in buckets:
        path = manifest_path(name, bucket, buckets_dir)
        if path is not None:
            return _read_manifest_file(path), bucket

    return None, None


def _arch_value(manifest: Dict, arch: str, field: str):
    if arch not in ARCHITECTURES:
        raise ValueError(f"Unknown architecture: {arch}")
    architecture = manifest.get('architecture')
    arch_block = architecture.get(arch) if isinstance(architecture, dict) else None
    value = arch_block.get(field) if isinstance(arch_block, dict) else None
    if value is None:
        value = manifest.get(field)
    return value


def _string_values(items: List) -> Tuple[str, ...]:
    return tuple(v.strip() for v in items if isinstance(v, str) and v.strip())


def hash_for(manifest: Dict, arch: str) -> Optional[HashSpec]:
    """Hash field for arch as a SingleHash or HashList, None if absent"""
    value = _arch_value(manifest, arch, 'hash')
    if isinstance(value, str) and value.strip():
        return SingleHash(value.strip())
    if isinstance(value, list):
        values = _string_values(value)
        if values:
            return HashList(values)
    return None


def url_for(manifest: Dict, arch: str) -> Optional[UrlSpec]:
    """URL field for arch as a SingleUrl or UrlList, None if absent"""
    value = _arch_value(manifest, arch, 'url')
    if isinstance(value, str) and value.strip():
        return SingleUrl(value.strip())
    if isinstance(value, list):
        values = _string_values(value)
        if values:
            return UrlList(values)
    return None


def pairs(hashes: HashSpec, urls: Optional[UrlSpec]) -> Iterator[Tuple[str, Optional[str]]]:
    """Yield (hash, url) in lockstep; a missing URL pairs as None"""
    if isinstance(hashes, SingleHash):
        if isinstance(urls, SingleUrl):
            yield hashes.value, urls.value
        elif isinstance(urls, UrlList):
            yield hashes.value, urls.values[0]
        else:
            yield hashes.value, None
        return

    if isinstance(urls, SingleUrl):
        url_values: Tuple[str, ...] = (urls.value,)
    elif isinstance(urls, UrlList):
        url_values = urls.values
    else:
        url_values = ()

    for index, hash_value in enumerate(hashes.values):
        yield hash_value, url_values[index] if index < len(url_values) else None
