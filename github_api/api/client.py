"""
GitHub API client for making authenticated requests.

Handles authentication headers, conditional (ETag) caching, boolean status
queries, binary payloads and rate-limit/progress notifications. All resource
operations go through GitHubAPIClient.request().
"""

import base64
import dataclasses
import json
import logging
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlencode

import httpx

from github_api.api.cache import ConditionalCache
from github_api.api.response import (
    NormalizedResponse,
    ResponseKind,
    is_cacheable,
    normalize_response,
)
from github_api.config.config import (
    GITHUB_ACCEPT,
    GITHUB_API_URL,
    GITHUB_BOOLEAN_FALSE_STATUS,
    GITHUB_BOOLEAN_TRUE_STATUS,
    GITHUB_CACHE_ENABLED,
    GITHUB_CONNECT_TIMEOUT,
    GITHUB_PASSWORD,
    GITHUB_REQUEST_TIMEOUT,
    GITHUB_TOKEN,
    GITHUB_USE_POST_INSTEAD_OF_PATCH,
    GITHUB_USER_AGENT,
    GITHUB_USERNAME,
    NOT_MODIFIED_SINCE_SENTINEL,
)
from github_api.exceptions import RemoteError, error_from_response
from github_api.models.types import CacheEntry, RateLimitInfo, RequestOptions

logger = logging.getLogger(__name__)

RateLimitListener = Callable[[Optional[int], Optional[int], str, str, Any, RequestOptions], None]
ProgressListener = Callable[[str, str], None]


def build_query_string(path: str, params: Optional[Dict[str, Any]]) -> str:
    """Append query parameters to a path, skipping None values."""
    if not params:
        return path
    pairs = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        pairs.append((key, value))
    if not pairs:
        return path
    separator = "&" if "?" in path else "?"
    return f"{path}{separator}{urlencode(pairs)}"


def _parse_int_header(value: Optional[str]) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


class GitHubAPIClient:
    """Base client for GitHub API interactions.

    Owns the per-instance conditional cache and the listener lists; nothing
    is shared between client instances.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        api_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        cache_enabled: Optional[bool] = None,
        use_post_instead_of_patch: Optional[bool] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize GitHub API client.

        Args:
            token: OAuth/personal access token (defaults to config)
            username: Username for basic auth, used when no token is given
            password: Password for basic auth
            api_url: API root URL (defaults to config)
            user_agent: Value of the required User-Agent header
            cache_enabled: Use ETag conditional requests for reads
            use_post_instead_of_patch: Send PATCH requests as POST
            timeout: Request timeout in seconds
            transport: Optional httpx transport (for proxies or testing)
        """
        self.token = token if token is not None else GITHUB_TOKEN
        self.username = username if username is not None else GITHUB_USERNAME
        self.password = password if password is not None else GITHUB_PASSWORD
        self.api_url = (api_url or GITHUB_API_URL).rstrip("/")
        self.user_agent = user_agent or GITHUB_USER_AGENT
        self.cache_enabled = GITHUB_CACHE_ENABLED if cache_enabled is None else cache_enabled
        self.use_post_instead_of_patch = (
            GITHUB_USE_POST_INSTEAD_OF_PATCH
            if use_post_instead_of_patch is None
            else use_post_instead_of_patch
        )
        self.timeout = timeout or GITHUB_REQUEST_TIMEOUT
        self.boolean_true_status = GITHUB_BOOLEAN_TRUE_STATUS
        self.boolean_false_status = GITHUB_BOOLEAN_FALSE_STATUS
        self._transport = transport

        self.cache = ConditionalCache()
        self.last_rate_limit: Optional[RateLimitInfo] = None
        self._rate_limit_listeners: List[RateLimitListener] = []
        self._progress_listeners: List[ProgressListener] = []

        if not self.has_credentials:
            logger.warning("GitHub API client initialized without credentials - only public data is accessible")

    @property
    def has_credentials(self) -> bool:
        return bool(self.token) or bool(self.username and self.password)

    def add_rate_limit_listener(self, listener: RateLimitListener) -> None:
        """Register a callback invoked after every completed request.

        The callback receives (remaining, limit, method, path, payload, options).
        """
        self._rate_limit_listeners.append(listener)

    def add_progress_listener(self, listener: ProgressListener) -> None:
        """Register a callback receiving ("start" | "end", path) notifications."""
        self._progress_listeners.append(listener)

    def clear_cache(self) -> None:
        self.cache.clear()

    def _get_auth_header(self) -> Optional[str]:
        if self.token:
            return f"token {self.token}"
        if self.username and self.password:
            credentials = f"{self.username}:{self.password}".encode("utf-8")
            return f"Basic {base64.b64encode(credentials).decode('ascii')}"
        return None

    def _get_headers(
        self,
        has_body: bool,
        options: RequestOptions,
        cached: Optional[CacheEntry] = None,
    ) -> Dict[str, str]:
        """Get headers for a GitHub API request.

        Args:
            has_body: Whether a payload is sent
            options: Request options
            cached: Cache entry whose ETag is sent as If-None-Match

        Returns:
            Headers dictionary
        """
        headers = {
            "Accept": GITHUB_ACCEPT,
            "User-Agent": self.user_agent,
        }
        if has_body and not options.raw:
            headers["Content-Type"] = "application/json;charset=UTF-8"

        auth_header = self._get_auth_header()
        if auth_header:
            headers["Authorization"] = auth_header

        if cached:
            headers["If-None-Match"] = cached.etag
        else:
            headers["If-Modified-Since"] = NOT_MODIFIED_SINCE_SENTINEL
        return headers

    @staticmethod
    def _serialize(data: Any, options: RequestOptions) -> Optional[Any]:
        if data is None:
            return None
        if options.raw:
            return data
        return json.dumps(data)

    async def _execute_http_request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        content: Optional[Any],
    ) -> httpx.Response:
        """Execute one HTTP request.

        Args:
            method: HTTP method
            url: Request URL
            headers: Request headers
            content: Serialized request body

        Returns:
            HTTP response
        """
        timeout_config = httpx.Timeout(self.timeout, connect=GITHUB_CONNECT_TIMEOUT)
        async with httpx.AsyncClient(
            timeout=timeout_config, trust_env=False, transport=self._transport
        ) as client:
            return await client.request(method, url, headers=headers, content=content)

    def _notify_rate_limit(
        self,
        response: httpx.Response,
        method: str,
        path: str,
        data: Any,
        options: RequestOptions,
    ) -> None:
        remaining = _parse_int_header(response.headers.get("X-RateLimit-Remaining"))
        limit = _parse_int_header(response.headers.get("X-RateLimit-Limit"))
        self.last_rate_limit = RateLimitInfo(remaining, limit, method, path, data, options)
        for listener in self._rate_limit_listeners:
            listener(remaining, limit, method, path, data, options)

    def _notify_progress(self, event: str, path: str) -> None:
        for listener in self._progress_listeners:
            listener(event, path)

    async def send(
        self,
        method: str,
        path: str,
        data: Any = None,
        options: Optional[RequestOptions] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> NormalizedResponse:
        """Make a GitHub API request and return the full normalized outcome.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            path: API path starting with "/" (without base URL)
            data: Request payload
            options: Raw/binary/boolean-query flags
            params: Query parameters, folded into the path

        Returns:
            NormalizedResponse with body, status text and the raw response

        Raises:
            GitHubAPIError: If the request fails
        """
        options = options or RequestOptions()
        path = build_query_string(path, params)
        method = method.upper()
        if method == "PATCH" and self.use_post_instead_of_patch:
            method = "POST"

        url = f"{self.api_url}{path}"
        # A 304 resolves against this entry even if the cache is cleared in flight
        cached = self.cache.get(path) if self.cache_enabled else None
        headers = self._get_headers(data is not None, options, cached)
        content = self._serialize(data, options)

        self._notify_progress("start", path)
        try:
            try:
                response = await self._execute_http_request(method, url, headers, content)
            except httpx.RequestError as e:
                error_msg = f"GitHub API request error: {e}"
                logger.error(error_msg)
                raise RemoteError(error_msg, None) from e

            self._notify_rate_limit(response, method, path, data, options)
            outcome = normalize_response(
                response, method, options, self.boolean_true_status, self.boolean_false_status
            )
            return self._resolve(outcome, method, path, cached)
        finally:
            self._notify_progress("end", path)

    def _resolve(
        self,
        outcome: NormalizedResponse,
        method: str,
        path: str,
        cached: Optional[CacheEntry],
    ) -> NormalizedResponse:
        if outcome.kind == ResponseKind.NOT_MODIFIED:
            if cached:
                logger.debug(f"GitHub API {method} {path} not modified, using cached body")
                return dataclasses.replace(outcome, body=cached.body)
            return outcome

        if outcome.kind in (ResponseKind.BOOLEAN_TRUE, ResponseKind.BOOLEAN_FALSE):
            return outcome

        if outcome.kind == ResponseKind.SUCCESS:
            if outcome.etag and self.cache_enabled and is_cacheable(method):
                self.cache.put(path, CacheEntry(outcome.etag, outcome.body, outcome.status_text))
            logger.debug(f"GitHub API {method} {path} successful (status: {outcome.status})")
            return outcome

        logger.error(f"GitHub API {method} {path} failed (status {outcome.status}): {outcome.body}")
        raise error_from_response(outcome.status, outcome.body)

    async def request(
        self,
        method: str,
        path: str,
        data: Any = None,
        options: Optional[RequestOptions] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make a GitHub API request and return the decoded body."""
        outcome = await self.send(method, path, data=data, options=options, params=params)
        return outcome.body

    async def request_all_pages(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Any]:
        """GET a list endpoint, following Link rel="next" until exhausted."""
        results: List[Any] = []
        next_path: Optional[str] = build_query_string(path, params)
        while next_path:
            outcome = await self.send("GET", next_path)
            if isinstance(outcome.body, list):
                results.extend(outcome.body)
            next_url = outcome.raw.links.get("next", {}).get("url")
            if next_url and next_url.startswith(self.api_url):
                next_path = next_url[len(self.api_url):]
            else:
                next_path = None
        return results

    async def get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        options: Optional[RequestOptions] = None,
    ) -> Any:
        """Make GET request.

        Args:
            path: API path
            params: Query parameters
            options: Raw/binary flags

        Returns:
            Decoded response body (the cached body on 304)
        """
        return await self.request("GET", path, params=params, options=options)

    async def post(self, path: str, data: Any = None) -> Any:
        """Make POST request.

        Args:
            path: API path
            data: Request payload

        Returns:
            Decoded response body
        """
        return await self.request("POST", path, data=data)

    async def put(self, path: str, data: Any = None, options: Optional[RequestOptions] = None) -> Any:
        """Make PUT request.

        Args:
            path: API path
            data: Request payload
            options: Raw/binary flags

        Returns:
            Decoded response body
        """
        return await self.request("PUT", path, data=data, options=options)

    async def patch(self, path: str, data: Any = None) -> Any:
        """Make PATCH request (sent as POST when use_post_instead_of_patch is set).

        Args:
            path: API path
            data: Request payload

        Returns:
            Decoded response body
        """
        return await self.request("PATCH", path, data=data)

    async def delete(self, path: str, data: Any = None, options: Optional[RequestOptions] = None) -> Any:
        """Make DELETE request.

        Args:
            path: API path
            data: Optional request payload (the contents API takes one)
            options: Raw/binary flags

        Returns:
            Decoded response body, usually empty
        """
        return await self.request("DELETE", path, data=data, options=options)

    async def check(self, path: str) -> bool:
        """Run a boolean query (e.g. "is starred").

        Args:
            path: API path

        Returns:
            True for the configured true status, False for the false status

        Raises:
            GitHubAPIError: For any other status
        """
        return await self.request("GET", path, options=RequestOptions(is_boolean_query=True))
