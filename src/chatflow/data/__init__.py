"""Built-in flow data."""

from .default_flow import DEFAULT_FLOW, default_graph, load_seed_flow

__all__ = ["DEFAULT_FLOW", "default_graph", "load_seed_flow"]
