"""InMemoryStateStore -- 进程内状态持有者

生命周期与进程相同；多进程 / 持久化场景使用外部实现。
"""

from typing import Generic, TypeVar

TState = TypeVar("TState")


class InMemoryStateStore(Generic[TState]):
    """StateStore 的内存实现"""

    def __init__(self, initial_state: TState) -> None:
        self._state = initial_state

    def get_state(self) -> TState:
        return self._state

    def set_state(self, state: TState) -> None:
        self._state = state
