"""taskagent Core Store -- 会话状态存储"""

from .memory_store import InMemoryStateStore
from .protocols import StateStore

__all__ = [
    "StateStore",
    "InMemoryStateStore",
]
