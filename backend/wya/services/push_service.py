import logging
import re
from dataclasses import dataclass, field

import httpx

from wya.core.errors import UpstreamFailure

logger = logging.getLogger(__name__)

# Expo accepts at most 100 messages per request.
PUSH_CHUNK_SIZE = 100

_EXPO_TOKEN_RE = re.compile(r"^(ExponentPushToken|ExpoPushToken)\[.+\]$")
_UUID_TOKEN_RE = re.compile(r"^[a-z\d]{8}-[a-z\d]{4}-[a-z\d]{4}-[a-z\d]{4}-[a-z\d]{12}$", re.IGNORECASE)


class PushDeliveryError(UpstreamFailure):
    pass


def is_push_token(token: str | None) -> bool:
    if not token or not isinstance(token, str):
        return False
    return bool(_EXPO_TOKEN_RE.match(token) or _UUID_TOKEN_RE.match(token))


@dataclass
class PushMessage:
    to: str
    title: str
    body: str
    sound: str = "default"
    priority: str = "high"
    data: dict = field(default_factory=dict)

    def to_payload(self) -> dict:
        payload = {
            "to": self.to,
            "title": self.title,
            "body": self.body,
            "sound": self.sound,
            "priority": self.priority,
        }
        if self.data:
            payload["data"] = self.data
        return payload


def chunk_messages(messages: list[PushMessage], size: int = PUSH_CHUNK_SIZE) -> list[list[PushMessage]]:
    return [messages[i:i + size] for i in range(0, len(messages), size)]


class ExpoPushClient:
    """Sends push notifications through the Expo push service."""

    def __init__(
        self,
        url: str,
        access_token: str = "",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.access_token = access_token
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> dict:
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
            "Content-Type": "application/json",
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def send(self, messages: list[PushMessage]) -> list[dict]:
        """Deliver messages and return Expo's per-message tickets.

        Raises PushDeliveryError when the push service cannot be reached or
        rejects the request as a whole.
        """
        for message in messages:
            if not is_push_token(message.to):
                raise ValueError(f"Invalid Expo push token: {message.to}")

        tickets: list[dict] = []
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            for chunk in chunk_messages(messages):
                try:
                    resp = await client.post(
                        self.url,
                        json=[m.to_payload() for m in chunk],
                        headers=self._headers(),
                    )
                    resp.raise_for_status()
                    body = resp.json()
                except httpx.HTTPError as e:
                    raise PushDeliveryError(f"Expo push request failed: {e}") from e
                except ValueError as e:
                    raise PushDeliveryError(f"Expo push response is not JSON: {e}") from e
                data = body.get("data") if isinstance(body, dict) else None
                if not isinstance(data, list):
                    raise PushDeliveryError(f"Unexpected Expo push response: {resp.text[:200]!r}")
                tickets.extend(t for t in data if isinstance(t, dict))

        for ticket in tickets:
            if ticket.get("status") == "error":
                logger.warning(
                    f"Expo rejected push: {ticket.get('message')} ({ticket.get('details', {}).get('error')})"
                )
        return tickets
