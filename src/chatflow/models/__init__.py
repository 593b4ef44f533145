"""Data models for the flow engine."""

from .config import Settings, get_settings
from .flow import (
    OPEN_PREFIX,
    ROOT_ID,
    WHATSAPP_ACTION,
    ChatbotConfig,
    Dangling,
    FlowGraph,
    FlowNode,
    NodeRef,
    OpenPath,
    Option,
    Target,
    WhatsAppAction,
    is_sentinel,
)

__all__ = [
    "FlowGraph",
    "FlowNode",
    "Option",
    "ChatbotConfig",
    "Target",
    "NodeRef",
    "WhatsAppAction",
    "OpenPath",
    "Dangling",
    "is_sentinel",
    "ROOT_ID",
    "WHATSAPP_ACTION",
    "OPEN_PREFIX",
    "Settings",
    "get_settings",
]
