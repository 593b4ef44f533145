"""Storage for the site-wide chatbot config and its enablement flag.

The flag is read and written separately from the flow document. The engine
never consults it; callers use it to decide whether to start a visitor
session at all.
"""

import json
from abc import ABC, abstractmethod

import httpx
from pydantic import ValidationError as ConfigValidationError
from redis import RedisError
from redis import asyncio as aioredis

from ..core.errors import PersistenceError
from ..models.config import Settings, get_settings
from ..models.flow import ChatbotConfig
from .logging_config import get_logger

logger = get_logger(__name__)

CONFIG_ENDPOINT = "/api/site-settings/chatbot"


class ChatbotConfigStore(ABC):
    """Abstract base class for chatbot config storage."""

    @abstractmethod
    async def get_config(self) -> ChatbotConfig | None:
        """Load the chatbot config, or None if it was never saved."""
        pass

    @abstractmethod
    async def set_enabled(self, is_enabled: bool) -> None:
        """Switch the chatbot online or offline on the website."""
        pass

    async def is_enabled(self) -> bool:
        """Check whether the chatbot is online. A missing config means offline."""
        config = await self.get_config()
        return config is not None and config.is_enabled


class InMemoryChatbotConfigStore(ChatbotConfigStore):
    """In-memory config store for development and testing."""

    def __init__(self, config: ChatbotConfig | None = None) -> None:
        self._config = config

    async def get_config(self) -> ChatbotConfig | None:
        if self._config is None:
            return None
        return self._config.model_copy()

    async def set_enabled(self, is_enabled: bool) -> None:
        config = self._config or ChatbotConfig()
        self._config = config.model_copy(update={"is_enabled": is_enabled})


class RedisChatbotConfigStore(ChatbotConfigStore):
    """Redis-backed config store keyed ``<prefix>config:<key>``."""

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        prefix: str = "chatflow:",
        key: str = "main",
    ) -> None:
        self.redis_url = redis_url
        self.prefix = prefix
        self.key = key
        self._client: aioredis.Redis | None = None

    async def _get_client(self) -> aioredis.Redis:
        """Get or create Redis client."""
        if self._client is None:
            self._client = aioredis.from_url(
                self.redis_url, encoding="utf-8", decode_responses=True
            )
        return self._client

    def _make_key(self) -> str:
        return f"{self.prefix}config:{self.key}"

    async def get_config(self) -> ChatbotConfig | None:
        try:
            client = await self._get_client()
            serialized = await client.get(self._make_key())
        except RedisError as e:
            raise PersistenceError(f"Redis load failed: {e}", operation="get_config") from e

        if serialized is None:
            return None
        try:
            return ChatbotConfig.model_validate(json.loads(serialized))
        except (json.JSONDecodeError, ConfigValidationError) as e:
            raise PersistenceError(
                f"Stored config is not valid: {e}", operation="get_config"
            ) from e

    async def set_enabled(self, is_enabled: bool) -> None:
        config = await self.get_config() or ChatbotConfig()
        config.is_enabled = is_enabled
        try:
            client = await self._get_client()
            await client.set(self._make_key(), config.model_dump_json(by_alias=True))
        except RedisError as e:
            raise PersistenceError(f"Redis save failed: {e}", operation="set_enabled") from e

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class HttpChatbotConfigStore(ChatbotConfigStore):
    """Config store backed by the site's chatbot settings endpoint."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def get_config(self) -> ChatbotConfig | None:
        client = await self._get_client()
        try:
            response = await client.get(CONFIG_ENDPOINT, headers={"Cache-Control": "no-store"})
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise PersistenceError(
                f"Config load failed: {e}", operation="get_config"
            ) from e

        if not isinstance(data, dict):
            return None
        try:
            return ChatbotConfig.model_validate(data)
        except ConfigValidationError as e:
            raise PersistenceError(
                f"Config payload is not valid: {e}", operation="get_config"
            ) from e

    async def set_enabled(self, is_enabled: bool) -> None:
        client = await self._get_client()
        try:
            response = await client.put(CONFIG_ENDPOINT, json={"isEnabled": is_enabled})
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise PersistenceError(
                "Failed to update online/offline status.", operation="set_enabled"
            ) from e
        logger.info("chatbot_enablement_changed", is_enabled=is_enabled)

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def get_config_store(settings: Settings | None = None) -> ChatbotConfigStore:
    """Factory function to create the config store selected by configuration."""
    settings = settings or get_settings()
    store_type = settings.config_store.lower()

    if store_type == "redis":
        return RedisChatbotConfigStore(
            redis_url=settings.redis_url, prefix=settings.redis_prefix, key=settings.flow_key
        )
    if store_type == "http":
        return HttpChatbotConfigStore(
            base_url=settings.api_base_url, timeout=settings.http_timeout_seconds
        )
    if store_type != "memory":
        logger.warning("unknown_config_store", config_store=store_type)
    return InMemoryChatbotConfigStore()
