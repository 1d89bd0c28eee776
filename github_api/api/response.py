"""
Normalization of raw GitHub responses.

GitHub encodes some answers in the status code alone (204/404 for "is
starred", 304 for "not modified") and returns error bodies as either JSON or
plain text. normalize_response() folds all of that into one NormalizedResponse
whose kind the API client switches on.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import httpx

from github_api.exceptions import DecodeError
from github_api.models.types import RequestOptions

READ_METHODS = ("GET", "HEAD")
# HEAD replies carry no body, so only GET results are stored
CACHEABLE_METHODS = ("GET",)


class ResponseKind(str, Enum):
    SUCCESS = "success"
    NOT_MODIFIED = "not_modified"
    BOOLEAN_TRUE = "boolean_true"
    BOOLEAN_FALSE = "boolean_false"
    ERROR = "error"


@dataclass
class NormalizedResponse:
    kind: ResponseKind
    body: Any
    status: int
    status_text: str
    etag: Optional[str]
    raw: httpx.Response


def is_read(method: str) -> bool:
    return method.upper() in READ_METHODS


def is_cacheable(method: str) -> bool:
    return method.upper() in CACHEABLE_METHODS


def _is_json(response: httpx.Response) -> bool:
    content_type = response.headers.get("Content-Type", "")
    return "json" in content_type.lower()


def _parse_json(response: httpx.Response) -> Any:
    try:
        return json.loads(response.text)
    except ValueError as e:
        raise DecodeError(response.text, response.status_code) from e


def decode_body(response: httpx.Response, method: str, options: RequestOptions) -> Any:
    """Decode a successful response body.

    Binary reads are returned as bytes exactly as received. Raw requests and
    non-JSON content types are returned as text.
    """
    if options.is_binary and is_read(method):
        return response.content
    if not response.content:
        return ""
    if options.raw or not _is_json(response):
        return response.text
    return _parse_json(response)


def decode_error_body(response: httpx.Response) -> Any:
    """Decode an error body: '' when empty, parsed JSON, or raw text."""
    if not response.content:
        return ""
    if not _is_json(response):
        return response.text
    return _parse_json(response)


def normalize_response(
    response: httpx.Response,
    method: str,
    options: RequestOptions,
    boolean_true_status: int,
    boolean_false_status: int,
) -> NormalizedResponse:
    """Classify a response into a single NormalizedResponse.

    Args:
        response: Response received from the server
        method: HTTP method actually sent
        options: Request options
        boolean_true_status: Status mapped to True for boolean queries
        boolean_false_status: Status mapped to False for boolean queries

    Returns:
        NormalizedResponse describing the outcome

    Raises:
        DecodeError: If a body declared as JSON cannot be parsed
    """
    status = response.status_code

    def build(kind: ResponseKind, body: Any) -> NormalizedResponse:
        return NormalizedResponse(
            kind=kind,
            body=body,
            status=status,
            status_text=response.reason_phrase,
            etag=response.headers.get("ETag"),
            raw=response,
        )

    if status == 304:
        return build(ResponseKind.NOT_MODIFIED, "")

    if options.is_boolean_query:
        if status == boolean_true_status:
            return build(ResponseKind.BOOLEAN_TRUE, True)
        if status == boolean_false_status:
            return build(ResponseKind.BOOLEAN_FALSE, False)
        # Any third status is a genuine failure, even a 2xx one
        return build(ResponseKind.ERROR, decode_error_body(response))

    if 200 <= status < 300:
        return build(ResponseKind.SUCCESS, decode_body(response, method, options))

    return build(ResponseKind.ERROR, decode_error_body(response))
