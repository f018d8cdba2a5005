"""HTTP client that hands resolved files to the chat delivery transport."""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

import aiohttp

from common.constants import DEFAULT_DELIVERY_BASE_URL, DEFAULT_DELIVERY_TIMEOUT_SECONDS
from common.logging_config import get_logger
from common.types import MediaKind
from filebot.exceptions import DeliveryFailedError

logger = get_logger(__name__)

SEND_METHODS = {
    MediaKind.DOCUMENT: "sendDocument",
    MediaKind.PHOTO: "sendPhoto",
    MediaKind.VIDEO: "sendVideo",
    MediaKind.AUDIO: "sendAudio",
}


class DeliveryTransport(ABC):
    """
    Sends an already stored payload to a chat.
    """

    @abstractmethod
    async def deliver(self, chat_id: str, media_kind: MediaKind, payload_ref: str, caption: str) -> None:
        """
        Deliver one file.

        Raises:
            DeliveryFailedError: The transport rejected the file or did not answer in time
        """

    async def close(self) -> None:
        return None


class TelegramDeliveryClient(DeliveryTransport):
    """
    Bot-API compatible sender.

    Posts {chat_id, <media_kind>: payload_ref, caption} to
    {base_url}/bot{token}/send{Document|Photo|Video|Audio}. No retries.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_DELIVERY_BASE_URL,
        timeout_seconds: float = DEFAULT_DELIVERY_TIMEOUT_SECONDS,
    ):
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session: Optional[aiohttp.ClientSession] = None

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            logger.info(f"Opened delivery session to {self._base_url}")
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def deliver(self, chat_id: str, media_kind: MediaKind, payload_ref: str, caption: str) -> None:
        method = SEND_METHODS.get(media_kind)
        if method is None:
            raise DeliveryFailedError(f"Unknown media kind: {media_kind}")

        url = f"{self._base_url}/bot{self._token}/{method}"
        payload = {
            "chat_id": chat_id,
            media_kind.value: payload_ref,
            "caption": caption,
        }
        session = self._ensure_session()

        try:
            async with session.post(url, json=payload) as resp:
                body = await resp.json(content_type=None)
                if resp.status >= 400 or not (isinstance(body, dict) and body.get("ok")):
                    description = body.get("description") if isinstance(body, dict) else None
                    logger.warning(
                        f"Delivery rejected by transport: status={resp.status} "
                        f"description={description!r} [chat_id={chat_id}]"
                    )
                    raise DeliveryFailedError(f"Transport rejected {method}: {description or resp.status}")
        except asyncio.TimeoutError as e:
            logger.error(f"Delivery timed out [chat_id={chat_id}] [method={method}]")
            raise DeliveryFailedError(f"{method} timed out") from e
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"Delivery failed [chat_id={chat_id}] [method={method}]: {e}", exc_info=True)
            raise DeliveryFailedError(f"{method} failed: {e}") from e

        logger.info(f"Delivered {media_kind.value} via {method} [chat_id={chat_id}]")
