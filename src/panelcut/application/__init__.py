"""Application layer - use cases and orchestration."""

from .commands import PackCutListCommand

__all__ = [
    "PackCutListCommand",
]
