"""Async HTTP client for the blog API."""

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx response from the blog API."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        detail = response.reason_phrase or "Request failed"
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            detail = body.get("detail") or body.get("error") or detail
        return cls(response.status_code, str(detail))


class BlogApiClient:
    """
    Thin async wrapper over every ``/api`` endpoint.

    Request and response bodies are the camelCase JSON dicts of the wire
    format. The session cookie set by the auth endpoints is kept by the
    underlying ``httpx.AsyncClient`` cookie jar.

    Args:
        base_url: Server root, e.g. ``http://localhost:8000``
        http_client: Preconfigured client; takes precedence over ``base_url``
    """

    def __init__(self, base_url: str = "", http_client: Optional[httpx.AsyncClient] = None):
        self._client = http_client or httpx.AsyncClient(base_url=base_url)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, f"/api{url}", **kwargs)
        if response.is_error:
            error = ApiError.from_response(response)
            logger.debug(f"{method} {url} failed: {error}")
            raise error
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ----- Posts -----
    async def list_posts(self, *, author: Optional[str] = None, tag: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {name: value for name, value in (("author", author), ("tag", tag)) if value}
        body = await self._request("GET", "/posts", params=params)
        return body["posts"]

    async def get_post(self, post_id: str) -> Optional[Dict[str, Any]]:
        """Single post, or None when it does not exist."""
        try:
            return await self._request("GET", f"/posts/{post_id}")
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise

    async def create_post(self, post_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/posts", json=post_data)

    async def update_post(self, post_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", "/posts", json={**updates, "postId": post_id})

    async def delete_post(self, post_id: str) -> None:
        await self._request("DELETE", "/posts", json={"postId": post_id})

    # ----- Comments -----
    async def list_comments(self, post_id: str) -> List[Dict[str, Any]]:
        body = await self._request("GET", "/comments", params={"postId": post_id})
        return body["comments"]

    async def create_comment(
        self, *, post_id: str, content: str, author_id: str, author_name: str
    ) -> Dict[str, Any]:
        return await self._request("POST", "/comments", json={
            "postId": post_id,
            "content": content,
            "authorId": author_id,
            "authorName": author_name,
        })

    async def update_comment(self, comment_id: str, content: str) -> Dict[str, Any]:
        return await self._request("PUT", f"/comments/{comment_id}", json={"content": content})

    async def delete_comment(self, comment_id: str) -> None:
        await self._request("DELETE", f"/comments/{comment_id}")

    # ----- Likes -----
    async def liked_post_ids(self, user_id: str) -> List[str]:
        body = await self._request("GET", "/likes", params={"userId": user_id})
        return body["postIds"]

    async def toggle_like(self, user_id: str, post_id: str) -> Dict[str, Any]:
        """Returns ``{"success", "isLiked", "likes"}``."""
        return await self._request("POST", "/likes", json={"userId": user_id, "postId": post_id})

    # ----- Auth -----
    async def register(self, *, email: str, password: str, display_name: str) -> Dict[str, Any]:
        return await self._request("POST", "/auth/register", json={
            "email": email,
            "password": password,
            "displayName": display_name,
        })

    async def sign_in(self, *, email: str, password: str) -> Dict[str, Any]:
        return await self._request("POST", "/auth/signin", json={"email": email, "password": password})

    async def create_session(
        self, *, custom_token: Optional[str] = None, id_token: Optional[str] = None
    ) -> Dict[str, Any]:
        payload = {"customToken": custom_token} if custom_token else {"idToken": id_token}
        return await self._request("POST", "/auth/session", json=payload)

    async def sign_out(self) -> Dict[str, Any]:
        return await self._request("POST", "/auth/signout")

    async def current_user(self) -> Dict[str, Any]:
        return await self._request("GET", "/auth/me")

    # ----- System -----
    async def check_connection(self) -> bool:
        """True when the server reports both backends reachable."""
        try:
            body = await self._request("GET", "/connection")
        except (ApiError, httpx.HTTPError):
            return False
        return bool(body and body.get("isOnline"))
