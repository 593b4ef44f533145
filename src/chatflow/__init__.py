"""Chatbot dialogue flow engine."""

from .core import (
    FlowEditor,
    FlowEngine,
    FlowNavigator,
    NavigationError,
    PersistenceError,
    SaveResult,
    Transition,
    TransitionKind,
    ValidationError,
    validate_flow,
)
from .models import ChatbotConfig, FlowGraph, FlowNode, Option

__version__ = "1.0.0"

__all__ = [
    "FlowEngine",
    "FlowEditor",
    "FlowNavigator",
    "SaveResult",
    "Transition",
    "TransitionKind",
    "validate_flow",
    "ValidationError",
    "PersistenceError",
    "NavigationError",
    "FlowGraph",
    "FlowNode",
    "Option",
    "ChatbotConfig",
]
