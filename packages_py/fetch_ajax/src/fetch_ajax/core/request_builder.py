"""
Request builder utilities for fetch_ajax.
"""
import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote

import httpx

from ..types import AjaxConfig, QueryData

logger = logging.getLogger("fetch_ajax.request_builder")

BODY_CONTENT_TYPE_METHODS = ("POST", "PUT")


def build_base_url(url: str, base_url: Optional[str] = None) -> str:
    """Prefix url with base_url unless url is already absolute."""
    if url.startswith("http"):
        return url
    if base_url:
        if not base_url.endswith("/"):
            base_url += "/"
        if url.startswith("/"):
            url = url[1:]
        return base_url + url
    return url


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def append_query(url: str, data: Optional[QueryData], encode: bool = False) -> str:
    """Fold a mapping or a preformatted query string into url."""
    if isinstance(data, Mapping):
        pairs = [f"{key}={_stringify(value)}" for key, value in data.items()]
        if not pairs:
            return url
        query = "&".join(pairs)
        if encode:
            query = quote(query, safe="=&")
    elif data:
        query = str(data)
    else:
        return url

    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def _is_file_part(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray, tuple)) or hasattr(value, "read")


def encode_multipart(fields: Mapping[str, Any]) -> Tuple[bytes, str]:
    """
    Encode an upload payload with httpx's multipart encoder.

    A "files" list becomes repeated "files" parts. File-like objects, bytes and
    (filename, content[, content_type]) tuples become file parts. Anything
    else is sent as a form field.
    """
    form: Dict[str, Union[str, List[str]]] = {}
    files: List[Tuple[str, Any]] = []

    for key, value in fields.items():
        if key == "files" and isinstance(value, (list, tuple)) and not _looks_like_file_tuple(value):
            files.extend((key, item) for item in value)
        elif _is_file_part(value):
            files.append((key, value))
        elif value is not None:
            form[key] = _stringify(value)

    request = httpx.Request(
        "POST",
        "http://multipart.invalid/",
        data=form or None,
        files=files or None,
    )
    content = request.read()
    return content, request.headers.get("content-type", "")


def _looks_like_file_tuple(value: Iterable[Any]) -> bool:
    # ("name.txt", b"...") is one file, not a list of two
    items = list(value)
    return isinstance(value, tuple) and len(items) in (2, 3) and isinstance(items[0], str)


def build_body(data: Any, is_file: bool = False) -> Tuple[Optional[Union[str, bytes]], Optional[str]]:
    """Return (body, content_type) where content_type is only set for uploads."""
    if is_file and isinstance(data, Mapping):
        return encode_multipart(data)
    if isinstance(data, (dict, list)):
        return json.dumps(data), None
    if data is None or isinstance(data, (str, bytes)):
        return data, None
    return str(data), None


def _has_header(headers: Mapping[str, str], name: str) -> bool:
    lower = name.lower()
    return any(key.lower() == lower for key in headers)


def inject_origin_headers(
    headers: Dict[str, str],
    origin_headers: Optional[Mapping[str, str]],
    keys: Optional[Iterable[str]],
) -> Dict[str, str]:
    """Copy allow-listed trace headers from origin_headers."""
    if not origin_headers or not keys:
        return headers
    for key in keys:
        value = origin_headers.get(key)
        if value:
            headers[key] = value
    return headers


def build_request(config: AjaxConfig) -> Tuple[str, Optional[Union[str, bytes]], Dict[str, str]]:
    """Derive (url, body, headers) from a merged config."""
    method = (config.method or "GET").upper()
    headers = dict(config.headers or {})
    url = build_base_url(config.url or "", config.base_url)

    body: Optional[Union[str, bytes]]
    if method == "GET":
        body = None
        url = append_query(url, config.data, bool(config.is_encode_url))
    else:
        if config.query:
            url = append_query(url, config.query, bool(config.is_encode_url))
        body, upload_content_type = build_body(config.data, bool(config.is_file))
        if config.is_file:
            if upload_content_type and not _has_header(headers, "content-type"):
                headers["content-type"] = upload_content_type
        elif method in BODY_CONTENT_TYPE_METHODS and not _has_header(headers, "content-type"):
            if config.default_put_and_post_content_type:
                headers["content-type"] = config.default_put_and_post_content_type

    inject_origin_headers(headers, config.origin_headers, config.default_inject_header_keys)

    logger.debug(f"build_request: method={method}, url={url}, has_body={body is not None}")
    return url, body, headers
