"""Application-level coordination of targets."""

from .orchestrator import Orchestrator

__all__ = ["Orchestrator"]
