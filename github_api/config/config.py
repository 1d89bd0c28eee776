"""
Configuration module for the GitHub API client.

Values are read from the environment (and an optional .env file) at import
time. Every value can be overridden per client through constructor arguments.
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def get_bool_env(key: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# API endpoint and identification
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")
GITHUB_USER_AGENT = os.getenv("GITHUB_USER_AGENT", "github-api-python")
GITHUB_ACCEPT = os.getenv("GITHUB_ACCEPT", "application/vnd.github.v3.raw+json")

# Credentials (token takes precedence over username/password)
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN")
GITHUB_USERNAME = os.getenv("GITHUB_USERNAME")
GITHUB_PASSWORD = os.getenv("GITHUB_PASSWORD")

# Transport behaviour
GITHUB_CACHE_ENABLED = get_bool_env("GITHUB_CACHE_ENABLED", True)
GITHUB_USE_POST_INSTEAD_OF_PATCH = get_bool_env("GITHUB_USE_POST_INSTEAD_OF_PATCH", False)
GITHUB_REQUEST_TIMEOUT = float(os.getenv("GITHUB_REQUEST_TIMEOUT", "150.0"))
GITHUB_CONNECT_TIMEOUT = float(os.getenv("GITHUB_CONNECT_TIMEOUT", "60.0"))

# Status codes mapped to True/False for boolean queries (e.g. "is starred")
GITHUB_BOOLEAN_TRUE_STATUS = int(os.getenv("GITHUB_BOOLEAN_TRUE_STATUS", "204"))
GITHUB_BOOLEAN_FALSE_STATUS = int(os.getenv("GITHUB_BOOLEAN_FALSE_STATUS", "404"))

# Sent when no validator is cached so the server never answers 304
NOT_MODIFIED_SINCE_SENTINEL = "Thu, 01 Jan 1970 00:00:00 GMT"
