"""
Core request pipeline pieces for fetch_ajax.
"""
from .adapter import TransportAdapter, abortable, json_parse
from .request_builder import (
    append_query,
    build_base_url,
    build_body,
    build_request,
    encode_multipart,
    inject_origin_headers,
)
from .timeout import consume_outcome, race_timeout
from .transport import HttpxResponse, HttpxTransport

__all__ = [
    "TransportAdapter",
    "abortable",
    "json_parse",
    "append_query",
    "build_base_url",
    "build_body",
    "build_request",
    "encode_multipart",
    "inject_origin_headers",
    "consume_outcome",
    "race_timeout",
    "HttpxResponse",
    "HttpxTransport",
]
