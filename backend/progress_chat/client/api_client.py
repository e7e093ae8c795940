"""
Async HTTP client for the Progress Chat API
"""
import json
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class APIError(Exception):
    """Non-2xx response from the API"""

    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class ProgressClient:
    """
    Thin wrapper over the REST endpoints

    Pass `http_client` to share a connection pool or to route requests
    through a custom transport.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8001",
        token: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 120.0
    ):
        self.token = token
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        response = await self._client.request(method, f"{API_PREFIX}{path}", headers=self._headers(), **kwargs)
        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = body.get("detail", response.text) if isinstance(body, dict) else response.text
            if not isinstance(detail, str):
                detail = json.dumps(detail)
            raise APIError(response.status_code, detail)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ==================== AUTH ====================

    async def signup(self, first_name: str, last_name: str, email: str, password: str, age: int,
                     location: Optional[Dict[str, float]] = None) -> Dict[str, Any]:
        data = await self._request("POST", "/auth/signup", json={
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "password": password,
            "age": age,
            "location": location,
        })
        self.token = data.get("token")
        return data

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = data.get("token")
        return data

    async def logout(self):
        await self._request("POST", "/auth/logout")
        self.token = None

    async def forgot_password(self, email: str) -> Dict[str, Any]:
        return await self._request("POST", "/auth/forgot-password", json={"email": email})

    async def reset_password(self, token: str, new_password: str) -> Dict[str, Any]:
        return await self._request("POST", "/auth/reset-password", json={"token": token, "new_password": new_password})

    # ==================== PROFILE ====================

    async def get_profile(self) -> Dict[str, Any]:
        return await self._request("GET", "/profile")

    async def update_profile(self, **fields) -> Dict[str, Any]:
        return await self._request("PATCH", "/profile", json=fields)

    async def get_memory(self) -> str:
        return (await self._request("GET", "/profile/memory"))["memory"]

    async def update_memory(self, memory: str) -> str:
        return (await self._request("PUT", "/profile/memory", json={"memory": memory}))["memory"]

    # ==================== CONVERSATIONS ====================

    async def list_conversations(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/conversations")

    async def create_conversation(self, title: str = "New Conversation") -> Dict[str, Any]:
        return await self._request("POST", "/conversations", json={"title": title})

    async def rename_conversation(self, conversation_id: int, title: str) -> Dict[str, Any]:
        return await self._request("PATCH", f"/conversations/{conversation_id}", json={"title": title})

    async def delete_conversation(self, conversation_id: int):
        return await self._request("DELETE", f"/conversations/{conversation_id}")

    async def get_messages(self, conversation_id: int) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/conversations/{conversation_id}/messages")

    async def edit_message(self, conversation_id: int, message_id: int, content: str) -> Dict[str, Any]:
        return await self._request(
            "PATCH", f"/conversations/{conversation_id}/messages/{message_id}", json={"content": content}
        )

    # ==================== CHAT ====================

    async def send_message(self, message: str, conversation_id: Optional[int] = None,
                           attachment_data_uri: Optional[str] = None, mode: str = "standard") -> Dict[str, Any]:
        return await self._request("POST", "/chat/send", json={
            "conversation_id": conversation_id,
            "message": message,
            "attachment_data_uri": attachment_data_uri,
            "mode": mode,
        })

    async def stream_message(self, message: str, conversation_id: Optional[int] = None,
                             attachment_data_uri: Optional[str] = None,
                             mode: str = "standard") -> AsyncIterator[Dict[str, Any]]:
        """Yield decoded SSE chunks (token, metadata, done, error)"""
        payload = {
            "conversation_id": conversation_id,
            "message": message,
            "attachment_data_uri": attachment_data_uri,
            "mode": mode,
        }
        async with self._client.stream(
            "POST", f"{API_PREFIX}/chat/stream", json=payload, headers=self._headers()
        ) as response:
            if response.status_code >= 400:
                body = await response.aread()
                raise APIError(response.status_code, body.decode("utf-8", errors="replace"))
            async for line in response.aiter_lines():
                if line.startswith("data: "):
                    yield json.loads(line[len("data: "):])

    async def regenerate(self, conversation_id: int, mode: str = "standard") -> Dict[str, Any]:
        return await self._request("POST", "/chat/regenerate", json={"conversation_id": conversation_id, "mode": mode})

    # ==================== FEEDBACK ====================

    async def submit_feedback(self, message_id: int, rating: str, reason: Optional[str] = None) -> Dict[str, Any]:
        return await self._request("POST", "/feedback", json={
            "message_id": message_id,
            "rating": rating,
            "reason": reason,
        })

    async def get_feedback(self, message_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/feedback/message/{message_id}")

    async def list_feedback(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/feedback")

    # ==================== MEDIA ====================

    async def generate_image(self, prompt: str) -> str:
        return (await self._request("POST", "/media/image", json={"prompt": prompt}))["image_data_uri"]

    async def speech_to_text(self, audio_data_uri: str) -> str:
        data = await self._request("POST", "/media/speech-to-text", json={"audio_data_uri": audio_data_uri})
        return data["transcription"]

    async def text_to_speech(self, text: str, voice: Optional[str] = None) -> str:
        data = await self._request("POST", "/media/text-to-speech", json={"text": text, "voice": voice})
        return data["audio_data_uri"]

    async def summarize(self, document_data_uri: str) -> str:
        data = await self._request("POST", "/media/summarize", json={"document_data_uri": document_data_uri})
        return data["summary"]
