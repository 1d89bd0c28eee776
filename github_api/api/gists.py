"""
GitHub gist operations.
"""

import logging
from typing import Any, Dict, Optional

from github_api.api.client import GitHubAPIClient
from github_api.exceptions import PreconditionMissing

logger = logging.getLogger(__name__)


class GistOperations:
    """Handles operations on one gist, or creation when gist_id is None."""

    def __init__(self, client: GitHubAPIClient, gist_id: Optional[str] = None):
        self.client = client
        self.gist_id = gist_id

    @property
    def gist_path(self) -> str:
        """API path of the bound gist.

        Raises:
            PreconditionMissing: If no gist id is bound yet (call create() first)
        """
        if self.gist_id is None:
            raise PreconditionMissing("No gist id set; create the gist or pass its id first")
        return f"/gists/{self.gist_id}"

    async def show(self) -> Dict[str, Any]:
        """Get the gist.

        Returns:
            Gist data including its files
        """
        return await self.client.get(self.gist_path)

    async def create(self, files: Dict[str, str], description: str = "", public: bool = False) -> Dict[str, Any]:
        """Create a gist and bind this instance to it.

        Args:
            files: Mapping of file name to content
            description: Gist description
            public: Whether the gist is public

        Returns:
            Created gist data
        """
        data = {
            "description": description,
            "public": public,
            "files": {name: {"content": content} for name, content in files.items()},
        }
        response = await self.client.post("/gists", data=data)
        self.gist_id = response["id"]
        logger.info(f"Created gist {self.gist_id}")
        return response

    async def update(self, files: Dict[str, Optional[str]], description: Optional[str] = None) -> Dict[str, Any]:
        """Update gist files; a None content deletes that file.

        Args:
            files: Mapping of file name to new content or None
            description: New description, left unchanged when None

        Returns:
            Updated gist data
        """
        data: Dict[str, Any] = {
            "files": {
                name: ({"content": content} if content is not None else None)
                for name, content in files.items()
            }
        }
        if description is not None:
            data["description"] = description
        return await self.client.patch(self.gist_path, data=data)

    async def delete(self) -> None:
        await self.client.delete(self.gist_path)
        logger.info(f"Deleted gist {self.gist_id}")

    async def is_starred(self) -> bool:
        """Check whether the authenticated user starred this gist."""
        return await self.client.check(f"{self.gist_path}/star")

    async def star(self) -> None:
        await self.client.put(f"{self.gist_path}/star")

    async def unstar(self) -> None:
        await self.client.delete(f"{self.gist_path}/star")
