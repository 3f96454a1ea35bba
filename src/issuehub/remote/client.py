"""GitHubIssues - Remote issue tracker backed by the GitHub REST API."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from issuehub.logging import sanitize_for_log, truncate_output
from issuehub.remote.exceptions import RemoteUnavailableError, RemoteUnconfiguredError
from issuehub.remote.models import RemoteIssue
from issuehub.snapshot_store import Comment, IssueStatus, parse_timestamp

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger("issuehub.remote")

# GitHub acts as one account, so the client's author rides along in the text
_CREATED_BY_RE = re.compile(r"\n*---\n_Created by (?P<author>.+?)_\s*$")
_COMMENT_AUTHOR_RE = re.compile(r"^\*\*(?P<author>[^*]+)\*\*: (?P<text>.*)$", re.DOTALL)

_STATE_FOR_STATUS = {
    IssueStatus.OPEN: "open",
    IssueStatus.CLOSED: "closed",
}


class RemoteAuthority(Protocol):
    """Interface for the remote source of truth."""

    def is_configured(self) -> bool:
        """Whether a target and credentials are present."""
        ...

    async def list_all(self) -> list[RemoteIssue]:
        """Every issue the remote holds, open and closed."""
        ...

    async def create(self, title: str, description: str, author: str) -> RemoteIssue:
        """Create an issue remotely."""
        ...

    async def set_status(self, remote_id: int, status: IssueStatus) -> None:
        """Open or close a remote issue."""
        ...

    async def add_comment(self, remote_id: int, author: str, text: str) -> None:
        """Append a comment to a remote issue."""
        ...

    async def list_comments(self, remote_id: int) -> list[Comment]:
        """Comments on a remote issue, oldest first."""
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...


def compose_body(description: str, author: str) -> str:
    """Issue body carrying the client-side author."""
    footer = f"---\n_Created by {author}_"
    return f"{description}\n\n{footer}" if description else footer


def split_body(body: str) -> tuple[str, str | None]:
    """Split an issue body into (description, author or None)."""
    match = _CREATED_BY_RE.search(body)
    if not match:
        return body, None
    return body[: match.start()].rstrip(), match.group("author")


class GitHubIssues:
    """Remote tracker over the issues of one GitHub repository.

    Every call raises ``RemoteUnavailableError`` on transport failures and
    non-success responses, and ``RemoteUnconfiguredError`` when no repo or
    token was given. Nothing is retried here: creates and comments are not
    idempotent.
    """

    def __init__(
        self,
        repo: str = "",
        token: str = "",
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
    ) -> None:
        """Initialize the client.

        Args:
            repo: GitHub repo in "owner/repo" format; empty means unconfigured
            token: GitHub personal access token with issues scope
            base_url: GitHub API base URL (for testing/enterprise)
            timeout: Per-request timeout in seconds
        """
        self.repo = repo
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    def is_configured(self) -> bool:
        return bool(self.repo and self.token)

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client for GitHub API."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/vnd.github+json",
                    "X-GitHub-Api-Version": "2022-11-28",
                },
                timeout=self.timeout,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        url: str,
        expected: Sequence[int] = (200,),
        **kwargs: Any,
    ) -> httpx.Response:
        if not self.is_configured():
            raise RemoteUnconfiguredError("GitHub repo or token not configured")
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("GitHub %s %s failed: %s", method, url, e)
            raise RemoteUnavailableError(f"GitHub request failed: {e}") from e

        if response.status_code not in expected:
            detail = sanitize_for_log(response.text)
            logger.warning(
                "GitHub %s %s returned %d: %s", method, url, response.status_code, detail
            )
            raise RemoteUnavailableError(
                f"GitHub {method} {url} failed: {response.status_code} - {detail}",
                status_code=response.status_code,
            )
        return response

    async def _paginate(self, url: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        """Collect every page of a list endpoint by following Link headers."""
        items: list[dict[str, Any]] = []
        next_url: str | None = url
        next_params: dict[str, Any] | None = params
        while next_url:
            response = await self._request("GET", next_url, params=next_params)
            page = _decode(response, url)
            if not isinstance(page, list):
                raise RemoteUnavailableError(f"GitHub GET {url} returned a non-list body")
            items.extend(page)
            next_url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            next_params = None
        return items

    async def list_all(self) -> list[RemoteIssue]:
        logger.debug("Listing issues in %s", self.repo)
        items = await self._paginate(
            f"/repos/{self.repo}/issues",
            {"state": "all", "per_page": 100, "sort": "created", "direction": "asc"},
        )
        # The issues endpoint also returns pull requests
        try:
            issues = [_to_remote_issue(item) for item in items if "pull_request" not in item]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RemoteUnavailableError(f"GitHub returned a malformed issue: {e!r}") from e
        logger.info("Fetched %d issue(s) from %s", len(issues), self.repo)
        return issues

    async def create(self, title: str, description: str, author: str) -> RemoteIssue:
        logger.info("Creating issue in %s: %s", self.repo, title)
        response = await self._request(
            "POST",
            f"/repos/{self.repo}/issues",
            expected=(201,),
            json={"title": title, "body": compose_body(description, author)},
        )
        try:
            issue = _to_remote_issue(_decode(response, "create"))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RemoteUnavailableError(f"GitHub returned a malformed issue: {e!r}") from e
        logger.info("Created issue #%d: %s", issue.number, issue.html_url)
        return issue

    async def set_status(self, remote_id: int, status: IssueStatus) -> None:
        logger.info("Setting issue #%d to %s", remote_id, status.value)
        await self._request(
            "PATCH",
            f"/repos/{self.repo}/issues/{remote_id}",
            json={"state": _STATE_FOR_STATUS[status]},
        )

    async def add_comment(self, remote_id: int, author: str, text: str) -> None:
        logger.info("Adding comment to issue #%d by %s", remote_id, author)
        await self._request(
            "POST",
            f"/repos/{self.repo}/issues/{remote_id}/comments",
            expected=(201,),
            json={"body": f"**{author}**: {text}"},
        )

    async def list_comments(self, remote_id: int) -> list[Comment]:
        items = await self._paginate(
            f"/repos/{self.repo}/issues/{remote_id}/comments",
            {"per_page": 100},
        )
        try:
            return [_to_comment(item) for item in items]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RemoteUnavailableError(f"GitHub returned a malformed comment: {e!r}") from e


def _decode(response: httpx.Response, what: str) -> Any:
    """JSON body of a successful response.

    Raises:
        RemoteUnavailableError: If the body is not JSON (e.g. a proxy error page).
    """
    try:
        return response.json()
    except ValueError as e:
        detail = truncate_output(sanitize_for_log(response.text), max_length=200)
        logger.warning("GitHub %s returned a non-JSON body: %s", what, detail)
        raise RemoteUnavailableError(f"GitHub {what} returned a non-JSON body") from e


def _to_comment(item: dict[str, Any]) -> Comment:
    body = item.get("body") or ""
    match = _COMMENT_AUTHOR_RE.match(body)
    if match:
        author, text = match.group("author"), match.group("text")
    else:
        author, text = item["user"]["login"], body
    return Comment(author=author, text=text, timestamp=parse_timestamp(item["created_at"]))


def _to_remote_issue(item: dict[str, Any]) -> RemoteIssue:
    description, author = split_body(item.get("body") or "")
    updated_at = item.get("updated_at")
    return RemoteIssue(
        number=int(item["number"]),
        node_id=str(item.get("node_id") or item["number"]),
        title=item["title"],
        body=description,
        state=item["state"],
        author=author or item["user"]["login"],
        html_url=item["html_url"],
        created_at=parse_timestamp(item["created_at"]),
        updated_at=parse_timestamp(updated_at) if updated_at else None,
    )
