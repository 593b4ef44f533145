"""Dialogue graph engine: validator, editor, navigator and session."""

from .editor import FlowEditor, generate_step_id
from .effects import (
    EffectHandler,
    LiveEffects,
    PreviewEffects,
    build_whatsapp_url,
    whatsapp_url_for,
)
from .engine import FlowEngine, SaveResult
from .errors import (
    REMEDIATION_MESSAGE,
    FlowError,
    NavigationError,
    PersistenceError,
    ValidationError,
)
from .navigator import FlowNavigator, Transition, TransitionKind
from .validator import (
    clean_options,
    find_dangling_references,
    is_valid_node,
    normalize_order,
    validate_flow,
)

__all__ = [
    # Session
    "FlowEngine",
    "SaveResult",
    # Editor
    "FlowEditor",
    "generate_step_id",
    # Navigator
    "FlowNavigator",
    "Transition",
    "TransitionKind",
    # Effects
    "EffectHandler",
    "LiveEffects",
    "PreviewEffects",
    "build_whatsapp_url",
    "whatsapp_url_for",
    # Validator
    "validate_flow",
    "clean_options",
    "is_valid_node",
    "normalize_order",
    "find_dangling_references",
    # Errors
    "FlowError",
    "ValidationError",
    "PersistenceError",
    "NavigationError",
    "REMEDIATION_MESSAGE",
]
