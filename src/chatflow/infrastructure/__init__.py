"""Persistence adapters and logging for the flow engine."""

from .config_store import (
    ChatbotConfigStore,
    HttpChatbotConfigStore,
    InMemoryChatbotConfigStore,
    RedisChatbotConfigStore,
    get_config_store,
)
from .flow_store import (
    FlowStore,
    HttpFlowStore,
    InMemoryFlowStore,
    RedisFlowStore,
    get_flow_store,
)
from .logging_config import (
    bind_session,
    clear_session,
    configure_structlog,
    get_logger,
)

__all__ = [
    # Logging
    "get_logger",
    "bind_session",
    "clear_session",
    "configure_structlog",
    # Flow persistence
    "FlowStore",
    "InMemoryFlowStore",
    "RedisFlowStore",
    "HttpFlowStore",
    "get_flow_store",
    # Enablement flag
    "ChatbotConfigStore",
    "InMemoryChatbotConfigStore",
    "RedisChatbotConfigStore",
    "HttpChatbotConfigStore",
    "get_config_store",
]
