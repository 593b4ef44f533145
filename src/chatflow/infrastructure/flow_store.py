"""Persistence layer for the chatbot flow.

This module provides the abstract flow store consumed by the engine and
in-memory (development), Redis-backed and site-API (HTTP) implementations.
Every backend failure surfaces as ``PersistenceError``.
"""

import json
from abc import ABC, abstractmethod
from typing import Any

import httpx
from redis import RedisError
from redis import asyncio as aioredis

from ..core.errors import PersistenceError
from ..models.config import Settings, get_settings
from ..models.flow import FlowGraph
from .logging_config import get_logger

logger = get_logger(__name__)

FLOW_ENDPOINT = "/api/site-settings/chatbot-flow"


class FlowStore(ABC):
    """Abstract base class for flow storage implementations."""

    @abstractmethod
    async def load_flow(self) -> dict[str, Any] | None:
        """Load the stored flow.

        Returns:
            Wire-shaped ``{isActive, order, nodes}`` payload, or None if no
            flow has been stored.

        Raises:
            PersistenceError: If the backend call fails.
        """
        pass

    @abstractmethod
    async def save_flow(self, graph: FlowGraph) -> None:
        """Persist a validated flow, replacing the stored one.

        Args:
            graph: Graph already accepted by the validator

        Raises:
            PersistenceError: If the backend call fails.
        """
        pass

    async def close(self) -> None:
        """Release backend connections. Nothing to release by default."""
        pass


class InMemoryFlowStore(FlowStore):
    """In-memory flow store for development and testing."""

    def __init__(self, payload: dict[str, Any] | None = None) -> None:
        self._payload = payload

    async def load_flow(self) -> dict[str, Any] | None:
        if self._payload is None:
            return None
        return json.loads(json.dumps(self._payload))

    async def save_flow(self, graph: FlowGraph) -> None:
        self._payload = graph.to_wire()


class RedisFlowStore(FlowStore):
    """Redis-backed flow store.

    The flow is stored as one JSON document under ``<prefix>flow:<key>``.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        prefix: str = "chatflow:",
        key: str = "main",
    ) -> None:
        """Initialize Redis flow store.

        Args:
            redis_url: Redis connection URL
            prefix: Key prefix for namespacing
            key: Flow document key
        """
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
        return f"{self.prefix}flow:{self.key}"

    async def load_flow(self) -> dict[str, Any] | None:
        try:
            client = await self._get_client()
            serialized = await client.get(self._make_key())
        except RedisError as e:
            raise PersistenceError(f"Redis load failed: {e}", operation="load") from e

        if serialized is None:
            return None

        try:
            return json.loads(serialized)
        except json.JSONDecodeError as e:
            raise PersistenceError("Stored flow is not valid JSON", operation="load") from e

    async def save_flow(self, graph: FlowGraph) -> None:
        try:
            client = await self._get_client()
            await client.set(self._make_key(), json.dumps(graph.to_wire()))
        except RedisError as e:
            raise PersistenceError(f"Redis save failed: {e}", operation="save") from e

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class HttpFlowStore(FlowStore):
    """Flow store backed by the site's chatbot-flow REST endpoint."""

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

    async def load_flow(self) -> dict[str, Any] | None:
        client = await self._get_client()
        try:
            response = await client.get(FLOW_ENDPOINT, headers={"Cache-Control": "no-store"})
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise PersistenceError(
                "Flow load failed",
                operation="load",
                status_code=e.response.status_code,
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise PersistenceError(f"Flow load failed: {e}", operation="load") from e

        return data if isinstance(data, dict) else None

    async def save_flow(self, graph: FlowGraph) -> None:
        client = await self._get_client()
        try:
            response = await client.put(FLOW_ENDPOINT, json=graph.to_wire())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PersistenceError(
                "Save failed",
                operation="save",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise PersistenceError(f"Save failed: {e}", operation="save") from e

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def get_flow_store(settings: Settings | None = None) -> FlowStore:
    """Factory function to create the flow store selected by configuration.

    Settings:
        flow_store: 'memory', 'redis' or 'http' (default: 'memory')

    Returns:
        Configured flow store instance
    """
    settings = settings or get_settings()
    store_type = settings.flow_store.lower()

    if store_type == "redis":
        return RedisFlowStore(
            redis_url=settings.redis_url, prefix=settings.redis_prefix, key=settings.flow_key
        )
    if store_type == "http":
        return HttpFlowStore(
            base_url=settings.api_base_url, timeout=settings.http_timeout_seconds
        )
    if store_type != "memory":
        logger.warning("unknown_flow_store", flow_store=store_type)
    return InMemoryFlowStore()
