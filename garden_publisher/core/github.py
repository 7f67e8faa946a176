"""GitHub contents API client used to create or update published notes."""

import base64
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from garden_publisher.core.config import DEFAULT_API_URL
from garden_publisher.core.models import RemoteLookup, RemoteWriteError

logger = logging.getLogger(__name__)


class GitHubContentStore:
    """Stores files in a GitHub repository through the contents API.

    Each write is a commit. Updating an existing file requires its current
    blob sha, which GitHub uses to reject writes based on a stale version.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        api_url: str = DEFAULT_API_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        """Initialize GitHubContentStore.

        Args:
            owner: Account owning the repository
            repo: Repository name
            token: Access token with contents write permission
            api_url: API base URL
            client: Client to use instead of creating one (it is not closed)
            timeout: Request timeout in seconds for a created client
        """
        self.owner = owner
        self.repo = repo
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self._base_url = api_url.rstrip('/')
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
        }

    async def __aenter__(self) -> "GitHubContentStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def contents_url(self, path: str) -> str:
        safe_path = quote(path.lstrip('/'), safe='/')
        return f"{self._base_url}/repos/{self.owner}/{self.repo}/contents/{safe_path}"

    async def lookup(self, path: str) -> RemoteLookup:
        """Check whether a file exists at path.

        Never raises: transport errors and unexpected statuses are reported
        as a failed lookup so the caller decides how to treat them.
        """
        try:
            response = await self.client.get(self.contents_url(path), headers=self._headers)
        except httpx.HTTPError as e:
            return RemoteLookup.failed(f"{type(e).__name__}: {e}")

        if response.status_code == 404:
            return RemoteLookup.not_found()
        if response.status_code != 200:
            return RemoteLookup.failed(f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            return RemoteLookup.failed(f"Invalid response body: {e}")

        if isinstance(data, dict) and data.get("type") == "file" and data.get("sha"):
            return RemoteLookup.found(data["sha"])
        return RemoteLookup.not_found()

    async def put(self, path: str, content: str, message: str, sha: str = "") -> Dict[str, Any]:
        """Create or update the file at path.

        Args:
            path: Repository-relative file path
            content: Text to store (encoded as base64 for the API)
            message: Commit message
            sha: Current blob sha when updating, empty when creating

        Returns:
            Parsed API response

        Raises:
            RemoteWriteError: On transport failure or a non-2xx response
        """
        payload = {
            "owner": self.owner,
            "repo": self.repo,
            "path": path,
            "message": message,
            "content": base64.b64encode(content.encode('utf-8')).decode('ascii'),
        }
        if sha:
            payload["sha"] = sha

        try:
            response = await self.client.put(
                self.contents_url(path), headers=self._headers, json=payload
            )
        except httpx.HTTPError as e:
            raise RemoteWriteError(path, None, str(e)) from e

        if response.is_error:
            raise RemoteWriteError(path, response.status_code, response.text)

        logger.debug("PUT %s -> %s", path, response.status_code)
        return response.json() if response.content else {}
