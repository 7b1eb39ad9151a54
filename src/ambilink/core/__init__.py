"""Connection supervision and the frame-to-color pipeline."""

from .pipeline import ColorPipeline, average_color, edge_color, strategy_for
from .supervisor import ConnectionSupervisor

__all__ = ["ColorPipeline", "ConnectionSupervisor", "average_color", "edge_color", "strategy_for"]
