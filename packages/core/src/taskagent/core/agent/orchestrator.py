"""AgentOrchestrator -- reducer / executor / state store 的中介者

process_event() 是事件进入历史记录的唯一路径。
编排器不做任何 intent 相关的分支判断；审批、终止、澄清
等策略由调用方基于 Thread 的判定方法实现。

同一个 store 同一时刻只允许一个 process_event / execute_tool_call 在途，
调用方负责串行化。
"""

import structlog

from ..models.event import Event, ToolCallEvent
from ..store.protocols import StateStore
from ..thread import Thread
from .executor import ToolExecutor
from .reducer import AgentReducer

log = structlog.get_logger()


class AgentOrchestrator:
    """Agent 编排器"""

    def __init__(
        self,
        reducer: AgentReducer[Thread, Event],
        executor: ToolExecutor,
        state_store: StateStore[Thread],
    ) -> None:
        self._reducer = reducer
        self._executor = executor
        self._state_store = state_store

    async def process_event(self, event: Event) -> Thread:
        """读取当前状态 -> reduce -> 持久化 -> 返回新状态"""
        current_state = self._state_store.get_state()
        new_state = self._reducer.reduce(current_state, event)
        self._state_store.set_state(new_state)
        log.debug("event_processed", event_type=event.type, thread_length=len(new_state))
        return new_state

    async def execute_tool_call(self, tool_call_event: ToolCallEvent) -> Thread:
        """记录 tool call -> 执行 -> 记录结果

        无论成功失败，每次调用恰好追加两条事件。

        Raises:
            TypeError: 传入的不是 tool_call 事件（调用方编程错误）
        """
        if not isinstance(tool_call_event, ToolCallEvent):
            raise TypeError(
                f"Event must be a tool_call event, got '{getattr(tool_call_event, 'type', None)}'"
            )

        await self.process_event(tool_call_event)

        result = await self._executor.execute(tool_call_event.data)
        final_state = await self.process_event(result.event)

        log.info(
            "tool_call_recorded",
            intent=tool_call_event.data.intent,
            outcome=result.event.type,
            thread_length=len(final_state),
        )
        return final_state

    def get_state(self) -> Thread:
        """返回当前持久化状态，无副作用"""
        return self._state_store.get_state()
