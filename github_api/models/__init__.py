"""
GitHub Models Module

Shared types, enums, and dataclasses for GitHub operations.
"""

from github_api.models.types import (
    CacheEntry,
    FileContent,
    FileMode,
    PendingWrite,
    PipelineState,
    RateLimitInfo,
    Ref,
    RepositoryInfo,
    RequestOptions,
    TreeEntry,
    TreeEntryType,
)

__all__ = [
    "CacheEntry",
    "FileContent",
    "FileMode",
    "PendingWrite",
    "PipelineState",
    "RateLimitInfo",
    "Ref",
    "RepositoryInfo",
    "RequestOptions",
    "TreeEntry",
    "TreeEntryType",
]
