"""
GitHub API client package.

Async client over the GitHub REST API with conditional caching and a Git
data write pipeline.

Main Components:
- GitHubService: Main facade for all GitHub operations
- API Client: Authenticated HTTP transport with ETag caching
- Git Data Operations: Refs, blobs, trees and commits of one repository
- Branch Pipeline: Multi-file commits built from Git data operations
"""

from github_api.github_service import GitHubService

__all__ = ["GitHubService"]
