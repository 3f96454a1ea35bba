"""Unit tests for GitHubIssues."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from issuehub.remote import (
    GitHubIssues,
    RemoteUnavailableError,
    RemoteUnconfiguredError,
    compose_body,
    split_body,
)
from issuehub.snapshot_store import IssueStatus


def _response(status_code: int = 200, json_data: Any = None, next_url: str | None = None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data
    response.text = "" if json_data is None else str(json_data)
    response.links = {"next": {"url": next_url}} if next_url else {}
    return response


def _issue_item(number: int, **overrides: Any) -> dict[str, Any]:
    item = {
        "number": number,
        "node_id": f"I_node{number}",
        "title": f"Issue {number}",
        "body": "",
        "state": "open",
        "user": {"login": "octocat"},
        "html_url": f"https://github.com/owner/repo/issues/{number}",
        "created_at": "2024-05-01T12:00:00Z",
        "updated_at": "2024-05-02T12:00:00Z",
    }
    item.update(overrides)
    return item


@pytest.fixture
def github() -> GitHubIssues:
    """GitHubIssues with a mocked HTTP client."""
    client = GitHubIssues(repo="owner/repo", token="test-token")
    client._client = MagicMock()
    client._client.request = AsyncMock()
    return client


@pytest.mark.unit
class TestBodyFormat:
    """Tests for author attribution in issue bodies."""

    def test_compose_with_description(self) -> None:
        assert compose_body("It broke", "alice") == "It broke\n\n---\n_Created by alice_"

    def test_compose_without_description(self) -> None:
        assert compose_body("", "alice") == "---\n_Created by alice_"

    def test_split_recovers_author(self) -> None:
        assert split_body(compose_body("It broke", "alice")) == ("It broke", "alice")

    def test_split_without_footer(self) -> None:
        assert split_body("Plain body") == ("Plain body", None)


@pytest.mark.unit
class TestConfiguration:
    """Tests for configured / unconfigured behaviour."""

    def test_configured(self) -> None:
        assert GitHubIssues(repo="owner/repo", token="t").is_configured()

    @pytest.mark.parametrize(("repo", "token"), [("", "t"), ("owner/repo", ""), ("", "")])
    def test_unconfigured(self, repo: str, token: str) -> None:
        assert not GitHubIssues(repo=repo, token=token).is_configured()

    @pytest.mark.asyncio
    async def test_unconfigured_calls_raise(self) -> None:
        client = GitHubIssues()

        with pytest.raises(RemoteUnconfiguredError):
            await client.list_all()

    def test_client_carries_auth_headers(self) -> None:
        client = GitHubIssues(repo="owner/repo", token="secret")

        http = client.client

        assert http.headers["Authorization"] == "Bearer secret"
        assert http.headers["Accept"] == "application/vnd.github+json"

    @pytest.mark.asyncio
    async def test_aclose_resets_client(self) -> None:
        client = GitHubIssues(repo="owner/repo", token="t")
        _ = client.client

        await client.aclose()

        assert client._client is None


@pytest.mark.unit
class TestListAll:
    """Tests for listing issues."""

    @pytest.mark.asyncio
    async def test_list_all_maps_issues(self, github: GitHubIssues) -> None:
        github._client.request.return_value = _response(
            json_data=[
                _issue_item(1, body=compose_body("broken", "alice")),
                _issue_item(2, state="closed"),
            ]
        )

        issues = await github.list_all()

        assert [i.number for i in issues] == [1, 2]
        assert issues[0].author == "alice"
        assert issues[0].body == "broken"
        assert issues[1].author == "octocat"
        assert not issues[1].is_open
        method, url = github._client.request.call_args.args
        assert (method, url) == ("GET", "/repos/owner/repo/issues")
        assert github._client.request.call_args.kwargs["params"]["state"] == "all"

    @pytest.mark.asyncio
    async def test_list_all_skips_pull_requests(self, github: GitHubIssues) -> None:
        github._client.request.return_value = _response(
            json_data=[_issue_item(1), _issue_item(2, pull_request={"url": "..."})]
        )

        issues = await github.list_all()

        assert [i.number for i in issues] == [1]

    @pytest.mark.asyncio
    async def test_list_all_follows_pagination(self, github: GitHubIssues) -> None:
        next_url = "https://api.github.com/repos/owner/repo/issues?page=2"
        github._client.request.side_effect = [
            _response(json_data=[_issue_item(1)], next_url=next_url),
            _response(json_data=[_issue_item(2)]),
        ]

        issues = await github.list_all()

        assert [i.number for i in issues] == [1, 2]
        second = github._client.request.call_args_list[1]
        assert second.args == ("GET", next_url)
        assert second.kwargs["params"] is None

    @pytest.mark.asyncio
    async def test_error_status_raises(self, github: GitHubIssues) -> None:
        github._client.request.return_value = _response(status_code=403, json_data={"m": "x"})

        with pytest.raises(RemoteUnavailableError) as exc_info:
            await github.list_all()

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, github: GitHubIssues) -> None:
        github._client.request.side_effect = httpx.ConnectError("no route")

        with pytest.raises(RemoteUnavailableError, match="no route"):
            await github.list_all()


@pytest.mark.unit
class TestMutations:
    """Tests for create / set_status / add_comment."""

    @pytest.mark.asyncio
    async def test_create_posts_attributed_body(self, github: GitHubIssues) -> None:
        github._client.request.return_value = _response(
            status_code=201, json_data=_issue_item(8, title="Bug", body=compose_body("x", "alice"))
        )

        issue = await github.create("Bug", "x", "alice")

        assert issue.number == 8
        assert issue.author == "alice"
        github._client.request.assert_awaited_once_with(
            "POST",
            "/repos/owner/repo/issues",
            json={"title": "Bug", "body": "x\n\n---\n_Created by alice_"},
        )

    @pytest.mark.asyncio
    async def test_create_requires_201(self, github: GitHubIssues) -> None:
        github._client.request.return_value = _response(status_code=200, json_data={})

        with pytest.raises(RemoteUnavailableError):
            await github.create("Bug", "", "alice")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "state"), [(IssueStatus.OPEN, "open"), (IssueStatus.CLOSED, "closed")]
    )
    async def test_set_status(self, github: GitHubIssues, status, state) -> None:
        github._client.request.return_value = _response(json_data={})

        await github.set_status(3, status)

        github._client.request.assert_awaited_once_with(
            "PATCH", "/repos/owner/repo/issues/3", json={"state": state}
        )

    @pytest.mark.asyncio
    async def test_add_comment_attributes_author(self, github: GitHubIssues) -> None:
        github._client.request.return_value = _response(status_code=201, json_data={})

        await github.add_comment(3, "bob", "same here")

        github._client.request.assert_awaited_once_with(
            "POST",
            "/repos/owner/repo/issues/3/comments",
            json={"body": "**bob**: same here"},
        )

    @pytest.mark.asyncio
    async def test_add_comment_failure(self, github: GitHubIssues) -> None:
        github._client.request.return_value = _response(status_code=404, json_data={})

        with pytest.raises(RemoteUnavailableError):
            await github.add_comment(3, "bob", "hi")


@pytest.mark.unit
class TestListComments:
    """Tests for reading comments."""

    @pytest.mark.asyncio
    async def test_attributed_and_plain_comments(self, github: GitHubIssues) -> None:
        github._client.request.return_value = _response(
            json_data=[
                {
                    "body": "**bob**: same here",
                    "user": {"login": "tracker-bot"},
                    "created_at": "2024-05-01T12:00:00Z",
                },
                {
                    "body": "Fixed in main",
                    "user": {"login": "octocat"},
                    "created_at": "2024-05-02T08:30:00Z",
                },
            ]
        )

        comments = await github.list_comments(3)

        assert [(c.author, c.text) for c in comments] == [
            ("bob", "same here"),
            ("octocat", "Fixed in main"),
        ]
        assert comments[1].timestamp.day == 2


@pytest.mark.unit
class TestMalformedResponses:
    """Successful status codes with bodies that can't be used."""

    @pytest.mark.asyncio
    async def test_create_with_html_body(self, github: GitHubIssues) -> None:
        """A proxy page behind a 201 is reported as the remote being unavailable."""
        github._client.request.return_value = httpx.Response(201, text="<html>proxy</html>")

        with pytest.raises(RemoteUnavailableError, match="non-JSON"):
            await github.create("Bug", "", "alice")

    @pytest.mark.asyncio
    async def test_create_with_incomplete_issue(self, github: GitHubIssues) -> None:
        github._client.request.return_value = _response(status_code=201, json_data={"id": 1})

        with pytest.raises(RemoteUnavailableError, match="malformed issue"):
            await github.create("Bug", "", "alice")

    @pytest.mark.asyncio
    async def test_list_all_with_html_body(self, github: GitHubIssues) -> None:
        github._client.request.return_value = httpx.Response(200, text="<html>login</html>")

        with pytest.raises(RemoteUnavailableError):
            await github.list_all()

    @pytest.mark.asyncio
    async def test_list_all_with_object_body(self, github: GitHubIssues) -> None:
        github._client.request.return_value = _response(json_data={"message": "moved"})

        with pytest.raises(RemoteUnavailableError, match="non-list"):
            await github.list_all()

    @pytest.mark.asyncio
    async def test_list_all_with_malformed_item(self, github: GitHubIssues) -> None:
        github._client.request.return_value = _response(json_data=[_issue_item(1), "junk"])

        with pytest.raises(RemoteUnavailableError, match="malformed issue"):
            await github.list_all()

    @pytest.mark.asyncio
    async def test_list_comments_with_malformed_item(self, github: GitHubIssues) -> None:
        github._client.request.return_value = _response(json_data=[{"body": "no user"}])

        with pytest.raises(RemoteUnavailableError, match="malformed comment"):
            await github.list_comments(3)
