"""
GitHub repository operations.

RepositoryOperations is scoped to one repository and groups the Git data,
contents and collaborator operations with the branch write pipeline.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from github_api.api.client import GitHubAPIClient
from github_api.api.collaborators import CollaboratorOperations
from github_api.api.contents import ContentsOperations
from github_api.api.git_data import GitDataOperations
from github_api.git.branch_pipeline import BranchPipeline, FileMap
from github_api.models.types import FileContent, Ref, RepositoryInfo

logger = logging.getLogger(__name__)


class RepositoryOperations:
    """Handles GitHub operations for one repository."""

    def __init__(self, client: GitHubAPIClient, owner: str, repository_name: str):
        """Initialize repository operations.

        Args:
            client: GitHub API client
            owner: Repository owner
            repository_name: Repository name
        """
        self.client = client
        self.owner = owner
        self.repository_name = repository_name
        self.repo_path = f"/repos/{owner}/{repository_name}"

        self.git = GitDataOperations(client, owner, repository_name)
        self.contents = ContentsOperations(client, owner, repository_name)
        self.collaborators = CollaboratorOperations(client, owner, repository_name)
        self.pipeline = BranchPipeline(self.git)

    async def show(self) -> RepositoryInfo:
        response = await self.client.get(self.repo_path)
        return RepositoryInfo.from_dict(response)

    async def fork(self, organization: Optional[str] = None) -> Dict[str, Any]:
        data = {"organization": organization} if organization else None
        response = await self.client.post(f"{self.repo_path}/forks", data=data)
        logger.info(f"Forked {self.owner}/{self.repository_name}")
        return response

    async def compare(self, base: str, head: str) -> Dict[str, Any]:
        return await self.client.get(f"{self.repo_path}/compare/{base}...{head}")

    # Pull requests

    async def list_pulls(self, state: str = "open") -> List[Dict[str, Any]]:
        return await self.client.request_all_pages(f"{self.repo_path}/pulls", params={"state": state})

    async def get_pull(self, number: int) -> Dict[str, Any]:
        return await self.client.get(f"{self.repo_path}/pulls/{number}")

    async def create_pull(
        self,
        title: str,
        head: str,
        base: str,
        body: Optional[str] = None,
    ) -> Dict[str, Any]:
        data = {"title": title, "head": head, "base": base}
        if body:
            data["body"] = body
        response = await self.client.post(f"{self.repo_path}/pulls", data=data)
        logger.info(f"Opened pull request #{response.get('number')} in {self.owner}/{self.repository_name}")
        return response

    # Hooks

    async def list_hooks(self) -> List[Dict[str, Any]]:
        return await self.client.get(f"{self.repo_path}/hooks") or []

    async def create_hook(self, config: Dict[str, Any], events: Optional[List[str]] = None) -> Dict[str, Any]:
        data = {"name": "web", "active": True, "config": config, "events": events or ["push"]}
        return await self.client.post(f"{self.repo_path}/hooks", data=data)

    async def delete_hook(self, hook_id: int) -> None:
        await self.client.delete(f"{self.repo_path}/hooks/{hook_id}")

    # Branches and files

    async def list_branches(self) -> List[str]:
        return await self.git.list_branches()

    async def create_branch(self, branch: str, new_branch: str) -> Ref:
        return await self.pipeline.create_branch(branch, new_branch)

    async def read(self, branch: str, path: str, is_binary: bool = False) -> FileContent:
        return await self.pipeline.read(branch, path, is_binary=is_binary)

    async def write(
        self,
        branch: str,
        path: str,
        content: Union[str, bytes],
        message: Optional[str] = None,
        is_binary: bool = False,
    ) -> Ref:
        return await self.pipeline.write(branch, path, content, message=message, is_binary=is_binary)

    async def write_many(
        self,
        branch: str,
        files: FileMap,
        message: str,
        parents: Union[str, Sequence[str], None] = None,
    ) -> Ref:
        return await self.pipeline.write_many(branch, files, message, parents=parents)

    async def move(self, branch: str, path: str, new_path: str, message: Optional[str] = None) -> Ref:
        return await self.pipeline.move(branch, path, new_path, message=message)

    async def remove(
        self,
        branch: str,
        path: str,
        message: Optional[str] = None,
        sha: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.pipeline.remove(branch, path, message=message, sha=sha)
