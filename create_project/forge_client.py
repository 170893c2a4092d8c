"""Async client for the GitHub repository-creation API.

Wraps ``POST /user/repos`` with token authentication and turns the response
into either a ``RemoteRepository`` or a ``ForgeError`` carrying a readable
diagnostic.  The HTTP call itself sits behind the narrow ``ForgeAPI``
protocol so the rest of the tool can be exercised without network access.

Typical usage::

    client = ForgeClient(token=config.gh_apikey)
    repo = await create_remote("my-new-app", client)
    print(repo.default_branch)
"""

from __future__ import annotations

import json
from typing import Protocol

import httpx
from pydantic import BaseModel, Field

from . import __version__

GITHUB_API_URL = "https://api.github.com"
DEFAULT_BRANCH = "main"
USER_AGENT = f"create-project/{__version__}"


class ForgeError(Exception):
    """Raised when the remote repository cannot be created.

    ``details`` holds the response body (re-indented when it is JSON) so the
    caller can echo it for diagnosis.
    """

    def __init__(self, message: str, status_code: int | None = None, details: str = "") -> None:
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ForgeResponse(BaseModel):
    """Raw outcome of a repository-creation request."""

    status_code: int = Field(..., description="HTTP status code")
    body: str = Field(default="", description="Response body as text")


class RemoteRepository(BaseModel):
    """The bits of a freshly created repository the rest of the run needs."""

    name: str
    default_branch: str = Field(default=DEFAULT_BRANCH)
    html_url: str | None = None
    ssh_url: str | None = None


class ForgeAPI(Protocol):
    """Anything that can send a repository-creation request."""

    async def create_repository(self, name: str) -> ForgeResponse: ...


class ForgeClient:
    """``ForgeAPI`` implementation backed by ``httpx.AsyncClient``."""

    def __init__(
        self,
        token: str,
        base_url: str = GITHUB_API_URL,
        timeout: float = 30.0,
    ) -> None:
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"token {self.token}",
            "User-Agent": USER_AGENT,
            "Accept": "application/vnd.github+json",
        }

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and timeout."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=httpx.Timeout(self.timeout, connect=10.0),
        )

    async def create_repository(self, name: str) -> ForgeResponse:
        """POST ``{"name": name}`` to ``/user/repos``.

        Raises:
            ForgeError: If the request could not be sent or no response arrived.
        """
        try:
            async with self._client() as client:
                response = await client.post("/user/repos", json={"name": name})
        except httpx.ConnectError as exc:
            raise ForgeError(f"Cannot connect to {self.base_url}: {exc}") from exc
        except httpx.TimeoutException as exc:
            raise ForgeError(
                f"Request to {self.base_url} timed out after {self.timeout}s."
            ) from exc
        except httpx.HTTPError as exc:
            raise ForgeError(f"Failed to execute request: {exc}") from exc

        return ForgeResponse(status_code=response.status_code, body=response.text)


# ---------------------------------------------------------------------------
# Response handling
# ---------------------------------------------------------------------------


def _remote_from_body(name: str, body: str) -> RemoteRepository:
    """Build a ``RemoteRepository`` from a 201 body, tolerating junk."""
    try:
        data = json.loads(body)
    except ValueError:
        return RemoteRepository(name=name)
    if not isinstance(data, dict):
        return RemoteRepository(name=name)

    def text(key: str) -> str | None:
        value = data.get(key)
        return value if isinstance(value, str) and value else None

    return RemoteRepository(
        name=text("name") or name,
        default_branch=text("default_branch") or DEFAULT_BRANCH,
        html_url=text("html_url"),
        ssh_url=text("ssh_url"),
    )


async def create_remote(name: str, forge: ForgeAPI) -> RemoteRepository:
    """Create the remote repository *name*.

    Only HTTP 201 counts as success.  On any other status the body is parsed
    as JSON and re-serialised with two-space indentation into
    ``ForgeError.details``.

    Raises:
        ForgeError: On transport failure, a non-201 status, or a non-201
            status whose body is not JSON.
    """
    response = await forge.create_repository(name)
    if response.status_code == 201:
        return _remote_from_body(name, response.body)

    try:
        data = json.loads(response.body)
    except ValueError as exc:
        raise ForgeError(
            f"Failed to create repository (HTTP {response.status_code}); "
            f"response body is not valid JSON: {exc}",
            status_code=response.status_code,
            details=response.body,
        ) from exc

    raise ForgeError(
        f"Failed to create repository (HTTP {response.status_code})",
        status_code=response.status_code,
        details=json.dumps(data, indent=2, ensure_ascii=False),
    )
