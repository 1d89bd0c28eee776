"""
GitHub API Module

Handles all GitHub REST API interactions including:
- Authenticated requests and conditional caching
- Git data (refs, blobs, trees, commits)
- Repository, contents and collaborator management
- Users and gists
"""

from github_api.api.cache import ConditionalCache
from github_api.api.client import GitHubAPIClient
from github_api.api.collaborators import CollaboratorOperations
from github_api.api.contents import ContentsOperations
from github_api.api.gists import GistOperations
from github_api.api.git_data import GitDataOperations
from github_api.api.repositories import RepositoryOperations
from github_api.api.users import AuthenticatedUserOperations, UserOperations

__all__ = [
    "AuthenticatedUserOperations",
    "CollaboratorOperations",
    "ConditionalCache",
    "ContentsOperations",
    "GistOperations",
    "GitDataOperations",
    "GitHubAPIClient",
    "RepositoryOperations",
    "UserOperations",
]
