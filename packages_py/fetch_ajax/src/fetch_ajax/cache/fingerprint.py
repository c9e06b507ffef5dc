"""
Request fingerprints for de-duplication and caching.
"""
import hashlib
import json
from typing import Any, Dict, Optional

from ..types import AjaxConfig


def _serialize_data(data: Any) -> str:
    if data is None or data == "":
        return ""
    if isinstance(data, bytes):
        return data.hex()
    if isinstance(data, str):
        return json.dumps(data)
    return json.dumps(data, sort_keys=True, default=str)


def generate_fingerprint(
    method: str,
    url: str,
    base_url: Optional[str] = None,
    data: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> str:
    """
    SHA-256 over base url, url, method, serialized data and sorted headers.

    Header order does not matter; header values do.
    """
    parts = [base_url or "", url, method.upper(), _serialize_data(data)]
    if headers:
        parts.extend(f"{key}={value}" for key, value in sorted(headers.items()))

    hasher = hashlib.sha256()
    hasher.update("\x1f".join(parts).encode())
    return hasher.hexdigest()


def fingerprint_config(config: AjaxConfig) -> str:
    """Fingerprint of a merged config."""
    return generate_fingerprint(
        method=config.method or "GET",
        url=config.url or "",
        base_url=config.base_url,
        data=config.data,
        headers=config.headers,
    )
