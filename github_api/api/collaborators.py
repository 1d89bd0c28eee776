"""
GitHub collaborator management operations.
"""

import logging
from typing import Any, Dict, List, Optional

from github_api.api.client import GitHubAPIClient

logger = logging.getLogger(__name__)


class CollaboratorOperations:
    """Handles GitHub collaborator operations for one repository."""

    def __init__(self, client: GitHubAPIClient, owner: str, repository_name: str):
        self.client = client
        self.owner = owner
        self.repository_name = repository_name
        self.repo_path = f"/repos/{owner}/{repository_name}"

    async def list_collaborators(self) -> List[Dict[str, Any]]:
        return await self.client.request_all_pages(f"{self.repo_path}/collaborators")

    async def is_collaborator(self, username: str) -> bool:
        """Check whether a user is a collaborator (204 yes, 404 no)."""
        return await self.client.check(f"{self.repo_path}/collaborators/{username}")

    async def add_collaborator(self, username: str, permission: Optional[str] = None) -> Any:
        """Add a collaborator to the repository.

        Args:
            username: GitHub username
            permission: Permission level (pull, push, admin, maintain, triage)

        Returns:
            Invitation data, or '' when the user already had access
        """
        data = {"permission": permission} if permission else None
        response = await self.client.put(f"{self.repo_path}/collaborators/{username}", data=data)
        logger.info(f"Added collaborator {username} to {self.owner}/{self.repository_name}")
        return response

    async def remove_collaborator(self, username: str) -> None:
        await self.client.delete(f"{self.repo_path}/collaborators/{username}")
        logger.info(f"Removed collaborator {username} from {self.owner}/{self.repository_name}")
