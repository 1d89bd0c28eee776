"""
GitHub user operations.

UserOperations reads public user data. AuthenticatedUserOperations adds the
calls that act on the signed-in account; GitHubService attaches it only when
the client has credentials.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from github_api.api.client import GitHubAPIClient
from github_api.exceptions import PreconditionMissing

logger = logging.getLogger(__name__)


class UserOperations:
    """Read operations for a named user, or the signed-in user when username is None."""

    def __init__(self, client: GitHubAPIClient, username: Optional[str] = None):
        self.client = client
        self.username = username

    @property
    def user_path(self) -> str:
        return f"/users/{self.username}" if self.username else "/user"

    async def show(self) -> Dict[str, Any]:
        """Get the user profile."""
        return await self.client.get(self.user_path)

    async def list_repos(self, repo_type: str = "all", sort: str = "updated") -> List[Dict[str, Any]]:
        """List the user repositories across all pages.

        Args:
            repo_type: Repository type filter (all, owner, member)
            sort: Sort field (created, updated, pushed, full_name)

        Returns:
            Repository data
        """
        params = {"type": repo_type, "sort": sort, "per_page": 100}
        return await self.client.request_all_pages(f"{self.user_path}/repos", params=params)

    async def list_orgs(self) -> List[Dict[str, Any]]:
        return await self.client.get(f"{self.user_path}/orgs") or []

    async def list_gists(self) -> List[Dict[str, Any]]:
        """List the user gists across all pages."""
        return await self.client.request_all_pages(f"{self.user_path}/gists")


class AuthenticatedUserOperations:
    """Mutating operations on the signed-in account."""

    def __init__(self, client: GitHubAPIClient):
        self.client = client

    def _require_credentials(self) -> None:
        if not self.client.has_credentials:
            raise PreconditionMissing("This operation requires an authenticated client")

    async def update_profile(self, **fields: Any) -> Dict[str, Any]:
        """Update profile fields of the signed-in user.

        Args:
            **fields: Profile fields (name, email, blog, bio, ...)

        Returns:
            Updated user data

        Raises:
            PreconditionMissing: If the client has no credentials
        """
        self._require_credentials()
        response = await self.client.patch("/user", data=fields)
        logger.info(f"Updated profile fields: {sorted(fields)}")
        return response

    async def list_emails(self) -> List[Dict[str, Any]]:
        self._require_credentials()
        return await self.client.get("/user/emails") or []

    async def add_emails(self, emails: Union[str, List[str]]) -> List[Dict[str, Any]]:
        """Add one or more email addresses to the account."""
        self._require_credentials()
        if isinstance(emails, str):
            emails = [emails]
        return await self.client.post("/user/emails", data={"emails": emails})

    async def list_keys(self) -> List[Dict[str, Any]]:
        self._require_credentials()
        return await self.client.get("/user/keys") or []

    async def add_key(self, title: str, key: str) -> Dict[str, Any]:
        """Add a public SSH key.

        Args:
            title: Key label
            key: Public key text

        Returns:
            Created key data
        """
        self._require_credentials()
        return await self.client.post("/user/keys", data={"title": title, "key": key})

    async def is_following(self, username: str) -> bool:
        """Check whether the signed-in user follows username."""
        self._require_credentials()
        return await self.client.check(f"/user/following/{username}")

    async def follow(self, username: str) -> None:
        self._require_credentials()
        await self.client.put(f"/user/following/{username}")

    async def unfollow(self, username: str) -> None:
        self._require_credentials()
        await self.client.delete(f"/user/following/{username}")

    async def list_notifications(self, all_notifications: bool = False, participating: bool = False) -> List[Dict[str, Any]]:
        """List notifications.

        Args:
            all_notifications: Include notifications already read
            participating: Only notifications the user takes part in

        Returns:
            Notification threads
        """
        self._require_credentials()
        params = {"all": all_notifications, "participating": participating}
        return await self.client.get("/notifications", params=params) or []
