import abc
import logging
from typing import Any

import httpx

from app.common import errors

logger = logging.getLogger(__name__)


class AbstractMessageRelay(abc.ABC):
    @abc.abstractmethod
    async def post_message(self, text: str) -> int:
        """Post a message to the chat and return its reference."""

    @abc.abstractmethod
    async def edit_message(self, message_ref: int, text: str) -> None:
        """Replace the text of a previously posted message."""

    @abc.abstractmethod
    async def send_voice(
        self,
        content: bytes,
        filename: str,
        caption: str | None = None,
        reply_to: int | None = None,
    ) -> int:
        """Send a voice recording, optionally as a reply, and return its reference."""


class TelegramRelay(AbstractMessageRelay):
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        bot_token: str | None,
        chat_id: str | None,
        api_url: str = "https://api.telegram.org",
    ):
        self.http_client = http_client
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.api_url = api_url.rstrip("/")

    def _method_url(self, method: str) -> str:
        return f"{self.api_url}/bot{self.bot_token}/{method}"

    async def _call(self, method: str, **kwargs) -> Any:
        if not self.bot_token or not self.chat_id:
            logger.error("Telegram bot token or chat id is not configured")
            msg = "Telegram is not configured"
            raise errors.RelayError(msg)

        try:
            response = await self.http_client.post(self._method_url(method), **kwargs)
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(
                "Telegram request failed", extra={"method": method, "error": str(e)}
            )
            raise errors.RelayError() from e

        if not response.is_success or not isinstance(body, dict) or not body.get("ok"):
            description = body.get("description") if isinstance(body, dict) else None
            logger.error(
                "Telegram returned an error",
                extra={
                    "method": method,
                    "status_code": response.status_code,
                    "description": description,
                },
            )
            raise errors.RelayError()

        return body.get("result")

    async def _call_for_message(self, method: str, **kwargs) -> int:
        result = await self._call(method, **kwargs)
        if not isinstance(result, dict) or "message_id" not in result:
            logger.error(
                "Telegram response has no message id", extra={"method": method}
            )
            raise errors.RelayError()

        return result["message_id"]

    async def post_message(self, text: str) -> int:
        return await self._call_for_message(
            "sendMessage",
            json={"chat_id": self.chat_id, "text": text, "parse_mode": "HTML"},
        )

    async def edit_message(self, message_ref: int, text: str) -> None:
        await self._call(
            "editMessageText",
            json={
                "chat_id": self.chat_id,
                "message_id": message_ref,
                "text": text,
                "parse_mode": "HTML",
            },
        )

    async def send_voice(
        self,
        content: bytes,
        filename: str,
        caption: str | None = None,
        reply_to: int | None = None,
    ) -> int:
        data = {"chat_id": self.chat_id}
        if caption:
            data["caption"] = caption
        if reply_to:
            data["reply_to_message_id"] = str(reply_to)

        return await self._call_for_message(
            "sendVoice",
            data=data,
            files={"voice": (filename, content)},
        )
