"""
Shared types and models for GitHub operations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union


class TreeEntryType(str, Enum):
    BLOB = "blob"
    TREE = "tree"
    COMMIT = "commit"


class FileMode(str, Enum):
    REGULAR = "100644"
    EXECUTABLE = "100755"
    SUBDIRECTORY = "040000"
    SUBMODULE = "160000"
    SYMLINK = "120000"


class PipelineState(str, Enum):
    RESOLVING_REF = "resolving_ref"
    UPLOADING_BLOBS = "uploading_blobs"
    AWAITING_ALL_BLOBS = "awaiting_all_blobs"
    BUILDING_TREE = "building_tree"
    CREATING_COMMIT = "creating_commit"
    ADVANCING_REF = "advancing_ref"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RequestOptions:
    raw: bool = False
    is_binary: bool = False
    is_boolean_query: bool = False


@dataclass
class CacheEntry:
    etag: str
    body: Any
    status_text: str


@dataclass
class RateLimitInfo:
    remaining: Optional[int]
    limit: Optional[int]
    method: str
    path: str
    payload: Any
    options: RequestOptions


@dataclass
class TreeEntry:
    path: str
    mode: str = FileMode.REGULAR.value
    type: str = TreeEntryType.BLOB.value
    sha: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TreeEntry":
        return cls(
            path=data["path"],
            mode=data.get("mode", FileMode.REGULAR.value),
            type=data.get("type", TreeEntryType.BLOB.value),
            sha=data.get("sha"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {"path": self.path, "mode": self.mode, "type": self.type}
        if self.sha is not None:
            data["sha"] = self.sha
        return data


@dataclass
class PendingWrite:
    path: str
    content: Union[str, bytes]
    is_binary: bool = False


@dataclass
class Ref:
    name: str
    sha: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ref":
        return cls(name=data["ref"], sha=data["object"]["sha"], raw=data)


@dataclass
class FileContent:
    sha: str
    content: Union[str, bytes]


@dataclass
class RepositoryInfo:
    name: str
    owner: str
    full_name: str
    url: str
    default_branch: str
    private: bool
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RepositoryInfo":
        return cls(
            name=data["name"],
            owner=data["owner"]["login"],
            full_name=data["full_name"],
            url=data["html_url"],
            default_branch=data["default_branch"],
            private=data["private"],
            description=data.get("description"),
        )
