"""Mattermost client using aiohttp (REST API v4 + websocket)."""

import sys
from typing import Any, Mapping, Optional, Tuple

import aiohttp

from macobot.adapters.mattermost.models import Channel, Post, Team, User
from macobot.config import MattermostConfig


def _log(msg: str):
    print(msg, file=sys.stderr)


class MattermostError(RuntimeError):
    """Mattermost API call failed."""

    def __init__(self, message: str, status: int = 0, error_id: str = ""):
        super().__init__(message)
        self.status = status
        self.error_id = error_id


class MattermostClient:
    """Async Mattermost API client; implements ChatPort.

    One ``aiohttp.ClientSession`` is shared by every call, so ``post`` can be
    used concurrently from several relay tasks.
    """

    def __init__(self, config: MattermostConfig, http: Optional[aiohttp.ClientSession] = None):
        self._config = config
        self._http = http
        self._owns_http = http is None
        self.token: str = ""
        self.user: Optional[User] = None

    @property
    def api_base(self) -> str:
        return self._config.url.rstrip("/") + "/api/v4"

    @property
    def websocket_url(self) -> str:
        return self.api_base.replace("http", "ws", 1) + "/websocket"

    def _session(self) -> aiohttp.ClientSession:
        if self._http is None:
            self._http = aiohttp.ClientSession()
        return self._http

    async def close(self):
        if self._http is not None and self._owns_http:
            await self._http.close()
        self._http = None

    async def __aenter__(self) -> "MattermostClient":
        return self

    async def __aexit__(self, *exc):
        await self.close()

    async def _request(self, method: str, path: str, **kwargs) -> Tuple[Any, Mapping[str, str]]:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        async with self._session().request(
            method, self.api_base + path, headers=headers, **kwargs
        ) as resp:
            data = await resp.json(content_type=None)
            if resp.status >= 400:
                if isinstance(data, dict):
                    raise MattermostError(
                        data.get("message", f"HTTP {resp.status}"),
                        status=resp.status,
                        error_id=data.get("id", ""),
                    )
                raise MattermostError(f"HTTP {resp.status}", status=resp.status)
            return data, resp.headers

    # -- session setup --

    async def ping(self) -> str:
        """Return the server version; raises when the server is unreachable."""
        try:
            data, _ = await self._request("GET", "/config/client", params={"format": "old"})
        except aiohttp.ClientError as e:
            raise MattermostError(f"server unreachable: {e}") from e
        return str((data or {}).get("Version", "unknown"))

    async def login(self) -> User:
        data, headers = await self._request(
            "POST",
            "/users/login",
            json={"login_id": self._config.login, "password": self._config.password},
        )
        token = headers.get("Token", "")
        if not token:
            raise MattermostError("login response carried no session token")
        self.token = token
        self.user = User.model_validate(data)
        return self.user

    async def get_team_by_name(self, name: str) -> Team:
        data, _ = await self._request("GET", f"/teams/name/{name}")
        return Team.model_validate(data)

    async def get_channel_by_name(self, team_id: str, name: str) -> Channel:
        data, _ = await self._request("GET", f"/teams/{team_id}/channels/name/{name}")
        return Channel.model_validate(data)

    async def get_user(self, user_id: str) -> User:
        data, _ = await self._request("GET", f"/users/{user_id}")
        return User.model_validate(data)

    async def create_post(self, channel_id: str, message: str, root_id: str = "") -> Post:
        body = {"channel_id": channel_id, "message": message}
        if root_id:
            body["root_id"] = root_id
        data, _ = await self._request("POST", "/posts", json=body)
        return Post.model_validate(data)

    async def connect_websocket(self) -> aiohttp.ClientWebSocketResponse:
        """Open the event websocket and authenticate it with the session token."""
        ws = await self._session().ws_connect(self.websocket_url)
        await ws.send_json({
            "seq": 1,
            "action": "authentication_challenge",
            "data": {"token": self.token},
        })
        return ws

    # -- ChatPort --

    async def post(self, text: str, channel_id: str, thread_id: Optional[str] = None) -> bool:
        try:
            await self.create_post(channel_id, text, root_id=thread_id or "")
            return True
        except (aiohttp.ClientError, MattermostError, ValueError) as e:
            _log(f"[mattermost] failed to send a message to channel {channel_id}: {e}")
            return False

    async def get_username(self, user_id: str) -> Optional[str]:
        try:
            return (await self.get_user(user_id)).username or None
        except (aiohttp.ClientError, MattermostError, ValueError) as e:
            _log(f"[mattermost] user lookup failed for {user_id}: {e}")
            return None
