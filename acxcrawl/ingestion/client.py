"""HTTP client for the platform's public JSON API."""

from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from rich.console import Console

from ..errors import DecodeError, FetchError

console = Console()

DEFAULT_BASE_URL = "https://www.astralcodexten.com"


class ApiClient:
    """Fetch and decode JSON resources from a Substack-style API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        user_agent: str = "acxcrawl/0.1",
        transport: Optional[httpx.BaseTransport] = None,
        verbose: bool = True,
    ) -> None:
        """
        Initialize the API client.

        Args:
            base_url: Site root, without the ``/api/v1`` suffix
            timeout: Request timeout in seconds, None waits indefinitely
            user_agent: User-Agent header sent with every request
            transport: Optional httpx transport (used by tests)
            verbose: Print each requested URL
        """
        self.base_url = base_url.rstrip("/")
        self.verbose = verbose
        self._client = httpx.Client(
            timeout=timeout,
            headers={"User-Agent": user_agent},
            follow_redirects=True,
            transport=transport,
        )

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def archive_url(self) -> str:
        return f"{self.base_url}/api/v1/archive"

    def comments_url(self, post_id: int) -> str:
        return f"{self.base_url}/api/v1/post/{post_id}/comments"

    def post_url(self, slug: str) -> str:
        return f"{self.base_url}/api/v1/posts/{quote(slug, safe='')}"

    def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """GET a URL and decode the JSON body.

        Raises:
            FetchError: transport failure or non-2xx status
            DecodeError: body is not valid JSON
        """
        try:
            request = self._client.build_request("GET", url, params=params, headers=headers)
        except (httpx.InvalidURL, ValueError) as e:
            raise FetchError(f"Invalid request: {e}", url=url) from e

        if self.verbose:
            console.print(f"[dim]{request.url}[/dim]", highlight=False)

        try:
            response = self._client.send(request)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(f"HTTP {e.response.status_code}", url=str(request.url)) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Request failed: {e}", url=str(request.url)) from e

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Invalid JSON: {e}", url=str(request.url)) from e

    def get_archive_page(self, offset: int, limit: int) -> Any:
        """One page of the archive listing, newest first."""
        params = {"sort": "new", "search": "", "offset": offset, "limit": limit}
        return self.get_json(self.archive_url(), params=params)

    def get_post_comments(self, post_id: int) -> Any:
        """The full comment tree of one post."""
        params = {"token": "", "all_comments": "true", "sort": "oldest_first"}
        return self.get_json(self.comments_url(post_id), params=params)

    def get_post(self, slug: str) -> Any:
        """The detail record of one post."""
        return self.get_json(self.post_url(slug), headers={"Accept": "application/json"})
