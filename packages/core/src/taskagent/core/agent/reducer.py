"""AgentReducer 契约 + ThreadReducer 参考实现

reduce(state, event) -> state 是"会话状态如何随事件变化"的唯一抽象点：
同步、无副作用、确定性，不修改输入。
"""

from typing import Protocol, TypeVar

from ..models.event import Event
from ..thread import Thread

TState = TypeVar("TState")
TEvent = TypeVar("TEvent", contravariant=True)


class AgentReducer(Protocol[TState, TEvent]):
    """纯函数状态迁移接口"""

    def reduce(self, state: TState, event: TEvent) -> TState:
        """返回追加 event 之后的新状态"""
        ...


def append_event(state: Thread, event: Event) -> Thread:
    """构造旧事件 + 新事件的新 Thread"""
    return Thread([*state.events, event])


class ThreadReducer:
    """把事件追加到 Thread 历史的纯 reducer"""

    def reduce(self, state: Thread, event: Event) -> Thread:
        return append_event(state, event)
