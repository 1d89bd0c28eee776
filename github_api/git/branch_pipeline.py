"""
Branch write pipeline.

Turns logical file edits into a commit on a branch using the Git Database
API: resolve the branch tip, upload blobs in parallel, build a tree on top of
the parent, create the commit and advance the branch ref.

Every stage waits for the previous one to finish. The first failed call
aborts the pipeline, so the ref is never advanced past a partial write.
Blobs already created by a failed pipeline stay on the server.
Overlapping pipelines on the same branch are not serialized; the loser
gets a Conflict from advance_ref and retrying is up to the caller.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from github_api.api.git_data import GitDataOperations
from github_api.exceptions import NotFound
from github_api.models.types import (
    FileContent,
    FileMode,
    PendingWrite,
    PipelineState,
    Ref,
    TreeEntry,
    TreeEntryType,
)

logger = logging.getLogger(__name__)

FileMap = Union[Mapping[str, Union[str, bytes, PendingWrite]], Iterable[PendingWrite]]


@dataclass
class PipelineRun:
    """Progress of one pipeline invocation."""

    branch: str
    state: PipelineState = PipelineState.RESOLVING_REF
    parents: List[str] = field(default_factory=list)
    tree_sha: Optional[str] = None
    commit_sha: Optional[str] = None

    def advance(self, state: PipelineState) -> None:
        logger.debug(f"Pipeline on {self.branch}: {self.state.value} -> {state.value}")
        self.state = state


def to_pending_writes(files: FileMap) -> List[PendingWrite]:
    """Normalize the accepted file inputs into PendingWrite objects.

    Bytes values are treated as binary content.
    """
    if not isinstance(files, Mapping):
        return list(files)

    writes = []
    for path, content in files.items():
        if isinstance(content, PendingWrite):
            writes.append(content)
        else:
            writes.append(PendingWrite(path=path, content=content, is_binary=isinstance(content, bytes)))
    return writes


class BranchPipeline:
    """Multi-step commit construction on top of GitDataOperations."""

    def __init__(self, git: GitDataOperations):
        self.git = git

    async def _upload_blob(self, write: PendingWrite) -> TreeEntry:
        sha = await self.git.create_blob(write.content, is_binary=write.is_binary)
        return TreeEntry(
            path=write.path,
            mode=FileMode.REGULAR.value,
            type=TreeEntryType.BLOB.value,
            sha=sha,
        )

    @staticmethod
    async def _await_uploads(uploads: List[asyncio.Task]) -> List[TreeEntry]:
        try:
            return list(await asyncio.gather(*uploads))
        except Exception:
            # Wait for the remaining uploads so every task exception is retrieved
            await asyncio.gather(*uploads, return_exceptions=True)
            raise

    async def write_many(
        self,
        branch: str,
        files: FileMap,
        message: str,
        parents: Union[str, Sequence[str], None] = None,
    ) -> Ref:
        """Commit several files to a branch in one commit.

        Args:
            branch: Branch name
            files: Mapping of path to content (bytes means binary) or PendingWrite values
            message: Commit message
            parents: Explicit parent commit SHA(s); defaults to the branch tip

        Returns:
            The updated branch ref

        Raises:
            GitHubAPIError: From the first failed call; later stages are skipped
        """
        run = PipelineRun(branch=branch)
        try:
            if parents is None:
                parents = [await self.git.read_ref(f"heads/{branch}")]
            elif isinstance(parents, str):
                parents = [parents]
            run.parents = list(parents)

            writes = to_pending_writes(files)
            run.advance(PipelineState.UPLOADING_BLOBS)
            uploads = [asyncio.create_task(self._upload_blob(write)) for write in writes]

            run.advance(PipelineState.AWAITING_ALL_BLOBS)
            entries = await self._await_uploads(uploads)

            run.advance(PipelineState.BUILDING_TREE)
            run.tree_sha = await self.git.create_tree(entries, base_tree=run.parents[0])

            run.advance(PipelineState.CREATING_COMMIT)
            run.commit_sha = await self.git.create_commit(run.parents, run.tree_sha, message)

            run.advance(PipelineState.ADVANCING_REF)
            ref = await self.git.advance_ref(branch, run.commit_sha, force=False)
        except Exception:
            logger.error(f"Write to {branch} failed while {run.state.value}")
            run.advance(PipelineState.FAILED)
            raise

        run.advance(PipelineState.DONE)
        logger.info(f"Committed {len(entries)} file(s) to {branch} as {run.commit_sha}")
        return ref

    async def write(
        self,
        branch: str,
        path: str,
        content: Union[str, bytes],
        message: Optional[str] = None,
        is_binary: bool = False,
    ) -> Ref:
        """Commit a single file to a branch."""
        write = PendingWrite(path=path, content=content, is_binary=is_binary)
        return await self.write_many(branch, [write], message or f"Changed {path}")

    async def move(self, branch: str, path: str, new_path: str, message: Optional[str] = None) -> Ref:
        """Rename a file in a new commit, keeping every other entry.

        Raises:
            NotFound: If path is not in the branch tree
        """
        latest_commit = await self.git.read_ref(f"heads/{branch}")
        entries = await self.git.read_tree(latest_commit, recursive=True)

        found = False
        for entry in entries:
            if entry.path == path:
                entry.path = new_path
                found = True
            # Subtree hashes change with their contents; let the server recompute them
            if entry.type == TreeEntryType.TREE.value:
                entry.sha = None
        if not found:
            raise NotFound(f"No such file or directory: {path}", 404)

        tree_sha = await self.git.create_tree(entries)
        commit_sha = await self.git.create_commit(latest_commit, tree_sha, message or f"Moved {path} to {new_path}")
        ref = await self.git.advance_ref(branch, commit_sha, force=False)
        logger.info(f"Moved {path} to {new_path} on {branch}")
        return ref

    async def remove(
        self,
        branch: str,
        path: str,
        message: Optional[str] = None,
        sha: Optional[str] = None,
    ) -> dict:
        """Delete a file from a branch.

        When sha is given (e.g. from a prior read()) it is sent as-is, so the
        delete fails if the file changed in the meantime.
        """
        if sha is None:
            sha = await self.git.resolve_path_to_hash(branch, path)
        return await self.git.delete_file(path, message or f"Deleted {path}", sha, branch)

    async def read(self, branch: str, path: str, is_binary: bool = False) -> FileContent:
        """Read a file from the branch tip, returning its SHA and content."""
        commit_sha = await self.git.read_ref(f"heads/{branch}")
        sha = await self.git.resolve_path_to_hash(commit_sha, path)
        content = await self.git.read_blob(sha, is_binary=is_binary)
        return FileContent(sha=sha, content=content)

    async def create_branch(self, branch: str, new_branch: str) -> Ref:
        """Create new_branch pointing at the current tip of branch."""
        sha = await self.git.resolve_path_to_hash(branch, "")
        return await self.git.create_ref(f"refs/heads/{new_branch}", sha)
