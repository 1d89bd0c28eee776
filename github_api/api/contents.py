"""
GitHub repository contents operations.

Provides methods to read files and list directory contents from GitHub repositories.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from github_api.api.client import GitHubAPIClient
from github_api.models.types import RequestOptions

logger = logging.getLogger(__name__)


class ContentsOperations:
    """Handles GitHub repository contents operations."""

    def __init__(self, client: GitHubAPIClient, owner: str, repository_name: str):
        self.client = client
        self.owner = owner
        self.repository_name = repository_name
        self.repo_path = f"/repos/{owner}/{repository_name}"

    async def get_contents(
        self,
        path: str = "",
        ref: Optional[str] = None,
    ) -> Union[List[Dict[str, Any]], Dict[str, Any], str]:
        """Get contents of a directory or file.

        Directories come back as a list of entries. Because the client asks
        for raw media, a file comes back as its raw text.

        Args:
            path: Path to directory or file (empty string for root)
            ref: Git reference (branch, tag, commit SHA)

        Returns:
            Directory listing or file content
        """
        return await self.client.get(f"{self.repo_path}/contents/{path}", params={"ref": ref})

    async def get_file_content(
        self,
        path: str,
        ref: Optional[str] = None,
        is_binary: bool = False,
    ) -> Union[str, bytes]:
        """Get the raw content of a single file.

        Raises:
            NotFound: If the file does not exist
        """
        return await self.client.get(
            f"{self.repo_path}/contents/{path}",
            params={"ref": ref},
            options=RequestOptions(raw=True, is_binary=is_binary),
        )
