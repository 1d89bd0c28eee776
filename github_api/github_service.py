"""
Main GitHub Service - Unified facade for GitHub API operations.

This service provides a single entry point for:
- Repository operations, including the Git data API and branch writes
- User and gist operations
- Rate-limit and progress listeners
- Conditional cache management
"""

import logging
from typing import Any, Dict, Optional

import httpx

from github_api.api.client import GitHubAPIClient, ProgressListener, RateLimitListener
from github_api.api.gists import GistOperations
from github_api.api.repositories import RepositoryOperations
from github_api.api.users import AuthenticatedUserOperations, UserOperations
from github_api.exceptions import PreconditionMissing

logger = logging.getLogger(__name__)


class GitHubService:
    """
    Unified GitHub service providing all API functionality.

    Every resource handed out shares this service's API client, and with it
    one conditional cache and one set of listeners.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        api_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **client_options: Any,
    ):
        """Initialize GitHub service.

        Args:
            token: GitHub API token (defaults to config)
            username: Username for basic auth (defaults to config)
            password: Password for basic auth (defaults to config)
            api_url: API root URL (defaults to config)
            transport: Optional httpx transport
            **client_options: Extra GitHubAPIClient options (cache_enabled, user_agent, ...)
        """
        self.api_client = GitHubAPIClient(
            token=token,
            username=username,
            password=password,
            api_url=api_url,
            transport=transport,
            **client_options,
        )
        # Account mutations are only offered to authenticated clients
        self.me: Optional[AuthenticatedUserOperations] = (
            AuthenticatedUserOperations(self.api_client) if self.api_client.has_credentials else None
        )

    def get_repo(self, owner: str, repository_name: str) -> RepositoryOperations:
        return RepositoryOperations(self.api_client, owner, repository_name)

    def get_user(self, username: Optional[str] = None) -> UserOperations:
        """Get read operations for a user; None means the signed-in user.

        Raises:
            PreconditionMissing: If username is None and the client has no credentials
        """
        if username is None and not self.api_client.has_credentials:
            raise PreconditionMissing("No username given and the client is not authenticated")
        return UserOperations(self.api_client, username)

    def get_gist(self, gist_id: Optional[str] = None) -> GistOperations:
        return GistOperations(self.api_client, gist_id)

    async def get_rate_limit(self) -> Dict[str, Any]:
        return await self.api_client.get("/rate_limit")

    def add_rate_limit_listener(self, listener: RateLimitListener) -> None:
        self.api_client.add_rate_limit_listener(listener)

    def add_progress_listener(self, listener: ProgressListener) -> None:
        self.api_client.add_progress_listener(listener)

    def clear_cache(self) -> None:
        self.api_client.clear_cache()
