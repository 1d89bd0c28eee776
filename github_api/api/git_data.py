"""
GitHub Git data operations.

Exposes the Git object model of one repository (refs, blobs, trees, commits)
over the Git Database API.
"""

import base64
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Union

from github_api.api.client import GitHubAPIClient
from github_api.exceptions import NotFound
from github_api.models.types import Ref, RequestOptions, TreeEntry

logger = logging.getLogger(__name__)

HEADS_PREFIX = "refs/heads/"
TAGS_PREFIX = "refs/tags/"


def format_timestamp(value: Union[str, datetime, None]) -> Optional[str]:
    """Normalize a datetime to the ISO 8601 form the API expects."""
    if value is None or isinstance(value, str):
        return value
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def _strip_prefix(name: str, prefix: str) -> str:
    return name[len(prefix):] if name.startswith(prefix) else name


class GitDataOperations:
    """Handles Git object operations for one repository."""

    def __init__(self, client: GitHubAPIClient, owner: str, repository_name: str):
        """Initialize Git data operations.

        Args:
            client: GitHub API client
            owner: Repository owner
            repository_name: Repository name
        """
        self.client = client
        self.owner = owner
        self.repository_name = repository_name
        self.repo_path = f"/repos/{owner}/{repository_name}"

    async def read_ref(self, ref: str) -> str:
        """Get the commit SHA a ref points to.

        Args:
            ref: Ref name without the "refs/" prefix (e.g. "heads/main")

        Returns:
            Commit SHA

        Raises:
            NotFound: If the ref does not exist
        """
        response = await self.client.get(f"{self.repo_path}/git/refs/{ref}")
        # A partial name returns every matching ref as a list
        if not isinstance(response, dict) or "object" not in response:
            raise NotFound(f"Ref {ref} not found in {self.owner}/{self.repository_name}", 404)
        return response["object"]["sha"]

    async def create_ref(self, ref: str, sha: str) -> Ref:
        """Create a ref (e.g. "refs/heads/feature") pointing at a commit."""
        response = await self.client.post(f"{self.repo_path}/git/refs", data={"ref": ref, "sha": sha})
        logger.info(f"Created ref {ref} at {sha} in {self.owner}/{self.repository_name}")
        return Ref.from_dict(response)

    async def delete_ref(self, ref: str) -> None:
        await self.client.delete(f"{self.repo_path}/git/refs/{ref}")
        logger.info(f"Deleted ref {ref} in {self.owner}/{self.repository_name}")

    async def list_branches(self) -> List[str]:
        """List branch names in server order."""
        refs = await self.client.get(f"{self.repo_path}/git/refs/heads")
        return [_strip_prefix(ref["ref"], HEADS_PREFIX) for ref in refs or []]

    async def list_tags(self) -> List[str]:
        """List tag names in server order."""
        refs = await self.client.get(f"{self.repo_path}/git/refs/tags")
        return [_strip_prefix(ref["ref"], TAGS_PREFIX) for ref in refs or []]

    async def resolve_path_to_hash(self, branch: str, path: str) -> str:
        """Get the SHA of a path on a branch or commit.

        An empty path resolves to the branch tip commit.

        Raises:
            NotFound: If the path is not in the tree
        """
        if not path:
            return await self.read_ref(f"heads/{branch}")

        response = await self.client.get(
            f"{self.repo_path}/git/trees/{branch}", params={"recursive": "true"}
        )
        for entry in response.get("tree", []):
            if entry["path"] == path:
                return entry["sha"]
        raise NotFound(f"No such file or directory: {path}", 404)

    async def read_blob(self, sha: str, is_binary: bool = False) -> Union[str, bytes]:
        """Get raw blob content as text, or bytes when is_binary."""
        return await self.client.get(
            f"{self.repo_path}/git/blobs/{sha}",
            options=RequestOptions(raw=True, is_binary=is_binary),
        )

    async def read_tree(self, sha: str, recursive: bool = False) -> List[TreeEntry]:
        """Get the entries of a tree.

        Args:
            sha: Tree, commit or branch to read
            recursive: Include entries of every subtree

        Returns:
            Tree entries in server order
        """
        params = {"recursive": "true"} if recursive else None
        response = await self.client.get(f"{self.repo_path}/git/trees/{sha}", params=params)
        return [TreeEntry.from_dict(entry) for entry in response.get("tree", [])]

    async def create_blob(self, content: Union[str, bytes], is_binary: bool = False) -> str:
        """Create a blob and return its SHA.

        Binary bytes are base64-encoded before sending; a binary str is taken
        as already base64-encoded.
        """
        if is_binary:
            if isinstance(content, bytes):
                content = base64.b64encode(content).decode("ascii")
            payload = {"content": content, "encoding": "base64"}
        else:
            if isinstance(content, bytes):
                content = content.decode("utf-8")
            payload = {"content": content, "encoding": "utf-8"}

        response = await self.client.post(f"{self.repo_path}/git/blobs", data=payload)
        return response["sha"]

    async def create_tree(
        self,
        entries: Sequence[Union[TreeEntry, Dict[str, Any]]],
        base_tree: Optional[str] = None,
    ) -> str:
        """Create a tree and return its SHA.

        With base_tree the entries are overlaid on that tree; without it the
        entries must describe the full tree.
        """
        tree = [entry.to_dict() if isinstance(entry, TreeEntry) else entry for entry in entries]
        payload: Dict[str, Any] = {"tree": tree}
        if base_tree:
            payload["base_tree"] = base_tree
        response = await self.client.post(f"{self.repo_path}/git/trees", data=payload)
        return response["sha"]

    async def create_commit(
        self,
        parents: Union[str, Sequence[str]],
        tree: str,
        message: str,
    ) -> str:
        """Create a commit and return its SHA."""
        if isinstance(parents, str):
            parents = [parents]
        payload = {"message": message, "parents": list(parents), "tree": tree}
        response = await self.client.post(f"{self.repo_path}/git/commits", data=payload)
        logger.info(f"Created commit {response['sha']} in {self.owner}/{self.repository_name}")
        return response["sha"]

    async def advance_ref(self, head: str, sha: str, force: bool = False) -> Ref:
        """Point a branch at a commit.

        Without force the server rejects non-fast-forward updates (Conflict).
        """
        response = await self.client.patch(
            f"{self.repo_path}/git/refs/heads/{head}",
            data={"sha": sha, "force": force},
        )
        logger.info(f"Advanced {head} to {sha} in {self.owner}/{self.repository_name}")
        return Ref.from_dict(response)

    async def get_commit(self, sha: str) -> Dict[str, Any]:
        """Get a Git commit object (tree, parents, author, message)."""
        return await self.client.get(f"{self.repo_path}/git/commits/{sha}")

    async def list_commits(
        self,
        sha: Optional[str] = None,
        path: Optional[str] = None,
        author: Optional[str] = None,
        since: Union[str, datetime, None] = None,
        until: Union[str, datetime, None] = None,
    ) -> List[Dict[str, Any]]:
        """List commits, newest first.

        Args:
            sha: Branch or commit to start from
            path: Only commits touching this path
            author: Only commits by this login or email
            since: Only commits after this time
            until: Only commits before this time

        Returns:
            Commit data; empty when nothing matches
        """
        params = {
            "sha": sha,
            "path": path,
            "author": author,
            "since": format_timestamp(since),
            "until": format_timestamp(until),
        }
        return await self.client.get(f"{self.repo_path}/commits", params=params) or []

    async def delete_file(self, path: str, message: str, sha: str, branch: str) -> Dict[str, Any]:
        """Delete a file and commit the deletion in one call."""
        response = await self.client.delete(
            f"{self.repo_path}/contents/{path}",
            data={"message": message, "sha": sha, "branch": branch},
        )
        logger.info(f"Deleted {path} on {branch} in {self.owner}/{self.repository_name}")
        return response
