"""In-memory stand-in for the GitHub Git Database API.

Serves refs, blobs, trees, commits and the contents delete endpoint of a
single repository through httpx.MockTransport. Trees are stored flat as
path -> blob entry; directory entries are synthesized on read.
"""

import base64
import hashlib
import json
import re
from typing import Any, Dict, List, Optional, Set, Tuple

import httpx

OWNER = "octo"
REPO = "demo"
API_URL = "https://api.github.test"
REPO_PREFIX = f"/repos/{OWNER}/{REPO}"


def _sha(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()


def _not_found() -> httpx.Response:
    return httpx.Response(404, json={"message": "Not Found"})


class FakeGitHub:
    """Fake repository state plus an httpx request handler."""

    def __init__(self, files: Optional[Dict[str, str]] = None, branch: str = "main"):
        self.blobs: Dict[str, bytes] = {}
        self.trees: Dict[str, Dict[str, Dict[str, str]]] = {}
        self.commits: Dict[str, Dict[str, Any]] = {}
        self.refs: Dict[str, str] = {}
        self.calls: List[Tuple[str, str]] = []
        self.requests: List[httpx.Request] = []
        self.failing_blob_contents: Set[str] = set()
        self._commit_counter = 0

        entries = {}
        for path, content in (files or {}).items():
            entries[path] = self._blob_entry(self._store_blob(content.encode("utf-8")))
        tree_sha = self._store_tree(entries)
        self.refs[f"refs/heads/{branch}"] = self._store_commit("Initial commit", [], tree_sha)

    # State helpers

    def _store_blob(self, content: bytes) -> str:
        sha = _sha(b"blob " + content)
        self.blobs[sha] = content
        return sha

    @staticmethod
    def _blob_entry(sha: str) -> Dict[str, str]:
        return {"mode": "100644", "type": "blob", "sha": sha}

    def _store_tree(self, entries: Dict[str, Dict[str, str]]) -> str:
        sha = _sha(json.dumps(sorted(entries.items())).encode("utf-8"))
        self.trees[sha] = dict(entries)
        return sha

    def _store_commit(self, message: str, parents: List[str], tree: str) -> str:
        self._commit_counter += 1
        payload = json.dumps([message, parents, tree, self._commit_counter]).encode("utf-8")
        sha = _sha(payload)
        self.commits[sha] = {"sha": sha, "message": message, "parents": parents, "tree": tree}
        return sha

    def branch_sha(self, branch: str) -> str:
        return self.refs[f"refs/heads/{branch}"]

    def tree_of(self, treeish: str) -> Optional[Dict[str, Dict[str, str]]]:
        if treeish in self.trees:
            return self.trees[treeish]
        if treeish in self.commits:
            return self.trees[self.commits[treeish]["tree"]]
        ref = self.refs.get(f"refs/heads/{treeish}")
        if ref:
            return self.trees[self.commits[ref]["tree"]]
        return None

    def branch_files(self, branch: str) -> Dict[str, str]:
        tree = self.tree_of(self.branch_sha(branch))
        return {path: self.blobs[entry["sha"]].decode("utf-8") for path, entry in tree.items()}

    def _is_ancestor(self, ancestor: str, sha: str) -> bool:
        pending = [sha]
        while pending:
            current = pending.pop()
            if current == ancestor:
                return True
            pending.extend(self.commits.get(current, {}).get("parents", []))
        return False

    def _listing(self, tree: Dict[str, Dict[str, str]], recursive: bool) -> List[Dict[str, str]]:
        listing = {}
        for path, entry in tree.items():
            parts = path.split("/")
            for depth in range(1, len(parts)):
                directory = "/".join(parts[:depth])
                listing[directory] = {
                    "path": directory,
                    "mode": "040000",
                    "type": "tree",
                    "sha": _sha(directory.encode("utf-8")),
                }
            listing[path] = {"path": path, **entry}
        items = [listing[key] for key in sorted(listing)]
        if not recursive:
            items = [item for item in items if "/" not in item["path"]]
        return items

    # Request handling

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append((request.method, path))
        self.requests.append(request)
        body = json.loads(request.content) if request.content else None

        if not path.startswith(REPO_PREFIX):
            return _not_found()
        route = path[len(REPO_PREFIX):]

        handlers = [
            ("GET", r"/git/refs/(?P<namespace>heads|tags)", self._list_refs),
            ("GET", r"/git/refs/(?P<ref>.+)", self._get_ref),
            ("POST", r"/git/refs", self._create_ref),
            ("DELETE", r"/git/refs/(?P<ref>.+)", self._delete_ref),
            ("PATCH", r"/git/refs/heads/(?P<branch>.+)", self._update_ref),
            ("POST", r"/git/blobs", self._create_blob),
            ("GET", r"/git/blobs/(?P<sha>\w+)", self._get_blob),
            ("GET", r"/git/trees/(?P<treeish>[^/]+)", self._get_tree),
            ("POST", r"/git/trees", self._create_tree),
            ("POST", r"/git/commits", self._create_commit),
            ("GET", r"/git/commits/(?P<sha>\w+)", self._get_commit),
            ("DELETE", r"/contents/(?P<file_path>.+)", self._delete_file),
        ]
        for method, pattern, handler in handlers:
            match = re.fullmatch(pattern, route)
            if request.method == method and match:
                return handler(request, body, **match.groupdict())
        return _not_found()

    def _ref_body(self, name: str) -> Dict[str, Any]:
        return {"ref": name, "object": {"sha": self.refs[name], "type": "commit"}}

    def _list_refs(self, request, body, namespace):
        prefix = f"refs/{namespace}/"
        return httpx.Response(200, json=[self._ref_body(name) for name in self.refs if name.startswith(prefix)])

    def _get_ref(self, request, body, ref):
        name = f"refs/{ref}"
        if name not in self.refs:
            return _not_found()
        return httpx.Response(200, json=self._ref_body(name))

    def _create_ref(self, request, body):
        if body["ref"] in self.refs:
            return httpx.Response(422, json={"message": "Reference already exists"})
        self.refs[body["ref"]] = body["sha"]
        return httpx.Response(201, json=self._ref_body(body["ref"]))

    def _delete_ref(self, request, body, ref):
        if self.refs.pop(f"refs/{ref}", None) is None:
            return httpx.Response(422, json={"message": "Reference does not exist"})
        return httpx.Response(204)

    def _update_ref(self, request, body, branch):
        name = f"refs/heads/{branch}"
        if name not in self.refs:
            return _not_found()
        if not body.get("force") and not self._is_ancestor(self.refs[name], body["sha"]):
            return httpx.Response(422, json={"message": "Update is not a fast forward"})
        self.refs[name] = body["sha"]
        return httpx.Response(200, json=self._ref_body(name))

    def _create_blob(self, request, body):
        content = body["content"]
        if content in self.failing_blob_contents:
            return httpx.Response(500, json={"message": "Server Error"})
        if body["encoding"] == "base64":
            data = base64.b64decode(content)
        else:
            data = content.encode("utf-8")
        sha = self._store_blob(data)
        return httpx.Response(201, json={"sha": sha, "url": f"{API_URL}{REPO_PREFIX}/git/blobs/{sha}"})

    def _get_blob(self, request, body, sha):
        if sha not in self.blobs:
            return _not_found()
        return httpx.Response(
            200, content=self.blobs[sha], headers={"Content-Type": "application/vnd.github.raw"}
        )

    def _get_tree(self, request, body, treeish):
        tree = self.tree_of(treeish)
        if tree is None:
            return _not_found()
        recursive = request.url.params.get("recursive") in ("1", "true")
        return httpx.Response(
            200,
            json={"sha": treeish, "tree": self._listing(tree, recursive), "truncated": False},
        )

    def _create_tree(self, request, body):
        entries: Dict[str, Dict[str, str]] = {}
        if body.get("base_tree"):
            base = self.tree_of(body["base_tree"])
            if base is None:
                return httpx.Response(422, json={"message": "base_tree is not a valid tree"})
            entries.update(base)
        for entry in body["tree"]:
            if entry["type"] == "tree":
                continue
            if entry.get("sha") not in self.blobs:
                return httpx.Response(422, json={"message": f"Invalid sha for {entry['path']}"})
            entries[entry["path"]] = {"mode": entry["mode"], "type": "blob", "sha": entry["sha"]}
        sha = self._store_tree(entries)
        return httpx.Response(201, json={"sha": sha, "tree": self._listing(entries, True)})

    def _create_commit(self, request, body):
        if body["tree"] not in self.trees:
            return httpx.Response(422, json={"message": "Tree does not exist"})
        sha = self._store_commit(body["message"], body["parents"], body["tree"])
        return httpx.Response(201, json=self.commits[sha])

    def _get_commit(self, request, body, sha):
        if sha not in self.commits:
            return _not_found()
        return httpx.Response(200, json=self.commits[sha])

    def _delete_file(self, request, body, file_path):
        name = f"refs/heads/{body['branch']}"
        if name not in self.refs:
            return _not_found()
        tree = dict(self.tree_of(self.refs[name]))
        if file_path not in tree:
            return _not_found()
        if tree[file_path]["sha"] != body["sha"]:
            return httpx.Response(409, json={"message": f"{file_path} does not match {body['sha']}"})
        del tree[file_path]
        commit = self._store_commit(body["message"], [self.refs[name]], self._store_tree(tree))
        self.refs[name] = commit
        return httpx.Response(200, json={"content": None, "commit": self.commits[commit]})


def create_test_repository(fake: FakeGitHub, **client_options: Any):
    """
    Create a RepositoryOperations instance wired to a FakeGitHub.

    Args:
        fake: Fake server state
        **client_options: Extra GitHubAPIClient options

    Returns:
        RepositoryOperations for the fake repository
    """
    from github_api.api.client import GitHubAPIClient
    from github_api.api.repositories import RepositoryOperations

    client_options.setdefault("token", "test-token")
    client = GitHubAPIClient(api_url=API_URL, transport=fake.transport(), **client_options)
    return RepositoryOperations(client, OWNER, REPO)
