"""Tests for GitHubService and the thin resource operations."""

import json
from unittest.mock import MagicMock

import httpx
import pytest

from github_api import GitHubService
from github_api.api.users import AuthenticatedUserOperations
from github_api.exceptions import NotFound, PreconditionMissing
from github_api.models.types import CacheEntry

API_URL = "https://api.github.test"

ROUTES = {
    ("GET", "/repos/octo/demo"): httpx.Response(
        200,
        json={
            "name": "demo",
            "owner": {"login": "octo"},
            "full_name": "octo/demo",
            "html_url": "https://github.com/octo/demo",
            "default_branch": "main",
            "private": False,
            "description": "Demo repository",
        },
    ),
    ("GET", "/gists/starred-gist/star"): httpx.Response(204),
    ("GET", "/gists/plain-gist/star"): httpx.Response(404, json={"message": "Not Found"}),
    ("GET", "/repos/octo/demo/collaborators/alice"): httpx.Response(204),
    ("GET", "/repos/octo/demo/collaborators/bob"): httpx.Response(404, json={"message": "Not Found"}),
    ("GET", "/user/following/carol"): httpx.Response(204),
    ("GET", "/users/octo"): httpx.Response(200, json={"login": "octo"}),
    ("POST", "/gists"): httpx.Response(201, json={"id": "new-gist"}),
    ("POST", "/repos/octo/demo/pulls"): httpx.Response(201, json={"number": 7}),
    ("GET", "/rate_limit"): httpx.Response(200, json={"rate": {"limit": 5000, "remaining": 4990}}),
}


class Router:
    """Serves fixed responses keyed by (method, path)."""

    def __init__(self):
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        template = ROUTES.get((request.method, request.url.path))
        if template is None:
            return httpx.Response(404, json={"message": "Not Found"})
        return httpx.Response(
            template.status_code, content=template.content, headers=template.headers
        )


def make_service(**options):
    router = Router()
    options.setdefault("token", "test-token")
    service = GitHubService(api_url=API_URL, transport=httpx.MockTransport(router), **options)
    return service, router


class TestGitHubService:
    """Test the service facade."""

    @pytest.mark.asyncio
    async def test_repository_show(self):
        service, _ = make_service()

        info = await service.get_repo("octo", "demo").show()

        assert info.full_name == "octo/demo"
        assert info.default_branch == "main"
        assert info.description == "Demo repository"

    @pytest.mark.asyncio
    async def test_resources_share_one_client(self):
        service, _ = make_service()

        repo = service.get_repo("octo", "demo")

        assert repo.client is service.api_client
        assert repo.git.client is service.api_client
        assert service.get_gist("x").client is service.api_client

    @pytest.mark.asyncio
    async def test_rate_limit_listener_registration(self):
        service, _ = make_service()
        listener = MagicMock()
        service.add_rate_limit_listener(listener)

        result = await service.get_rate_limit()

        assert result["rate"]["remaining"] == 4990
        listener.assert_called_once()
        assert listener.call_args.args[2:4] == ("GET", "/rate_limit")

    def test_clear_cache(self):
        service, _ = make_service()
        service.api_client.cache.put("/user", CacheEntry(etag='"a"', body={}, status_text="OK"))

        service.clear_cache()

        assert len(service.api_client.cache) == 0

    @pytest.mark.asyncio
    async def test_create_pull(self):
        service, router = make_service()

        pull = await service.get_repo("octo", "demo").create_pull("Title", "feature", "main", body="Body")

        assert pull["number"] == 7
        assert json.loads(router.requests[0].content) == {
            "title": "Title",
            "head": "feature",
            "base": "main",
            "body": "Body",
        }

    @pytest.mark.asyncio
    async def test_missing_repository(self):
        service, _ = make_service()

        with pytest.raises(NotFound):
            await service.get_repo("octo", "missing").show()


class TestBooleanResources:
    """Test boolean query resources."""

    @pytest.mark.asyncio
    async def test_gist_is_starred(self):
        service, _ = make_service()

        assert await service.get_gist("starred-gist").is_starred() is True
        assert await service.get_gist("plain-gist").is_starred() is False

    @pytest.mark.asyncio
    async def test_is_collaborator(self):
        service, _ = make_service()
        collaborators = service.get_repo("octo", "demo").collaborators

        assert await collaborators.is_collaborator("alice") is True
        assert await collaborators.is_collaborator("bob") is False

    @pytest.mark.asyncio
    async def test_is_following(self):
        service, _ = make_service()

        assert await service.me.is_following("carol") is True
        assert await service.me.is_following("dave") is False


class TestUsers:
    """Test user capability sets."""

    @pytest.mark.asyncio
    async def test_named_user_without_credentials(self):
        service, router = make_service(token="", username="", password="")

        profile = await service.get_user("octo").show()

        assert profile == {"login": "octo"}
        assert "Authorization" not in router.requests[0].headers

    def test_current_user_requires_credentials(self):
        service, _ = make_service(token="", username="", password="")

        assert service.me is None
        with pytest.raises(PreconditionMissing):
            service.get_user()

    def test_authenticated_operations_attached_with_credentials(self):
        service, _ = make_service()

        assert isinstance(service.me, AuthenticatedUserOperations)
        assert service.get_user().user_path == "/user"

    @pytest.mark.asyncio
    async def test_authenticated_operations_guard(self):
        service, router = make_service(token="", username="", password="")
        account = AuthenticatedUserOperations(service.api_client)

        with pytest.raises(PreconditionMissing):
            await account.update_profile(name="Octo")

        assert router.requests == []


class TestGists:
    """Test gist creation."""

    @pytest.mark.asyncio
    async def test_create_binds_id(self):
        service, router = make_service()
        gist = service.get_gist()

        await gist.create({"hello.py": "print('hi')"}, description="Greeting")

        assert gist.gist_id == "new-gist"
        payload = json.loads(router.requests[0].content)
        assert payload["files"] == {"hello.py": {"content": "print('hi')"}}
        assert payload["public"] is False

    @pytest.mark.asyncio
    async def test_operations_without_id_require_one(self):
        """Test unbound gists fail before any request is sent."""
        service, router = make_service()
        gist = service.get_gist()

        with pytest.raises(PreconditionMissing):
            await gist.show()
        with pytest.raises(PreconditionMissing):
            await gist.is_starred()
        with pytest.raises(PreconditionMissing):
            await gist.delete()

        assert router.requests == []
