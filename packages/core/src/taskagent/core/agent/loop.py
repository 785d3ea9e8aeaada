"""AgentLoop -- 调用方控制循环

基于 AgentOrchestrator + LLMAgentReducer + gating.classify() 实现
human-in-the-loop 状态机：

    IDLE -> AWAITING_MODEL
    AWAITING_MODEL -> TERMINAL                  模型未给出 tool call / 步数耗尽
    AWAITING_MODEL -> AWAITING_HUMAN_RESPONSE   done_for_now / request_more_information
    AWAITING_MODEL -> AWAITING_HUMAN_APPROVAL   delete_task
    AWAITING_MODEL -> EXECUTING                 其他 intent
    EXECUTING -> AWAITING_MODEL / TERMINAL      tool_response / error
    AWAITING_HUMAN_APPROVAL -> EXECUTING / TERMINAL
    AWAITING_HUMAN_RESPONSE -> AWAITING_MODEL   新的用户输入

同一个 AgentLoop 实例不可并发调用。
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import structlog
from ulid import ULID

from ..config import get_max_steps
from ..exceptions import AgentError, InvalidLoopTransitionError
from ..gating import classify
from ..models.enums import LoopState, ToolCallDisposition, validate_loop_transition
from ..models.event import ErrorEvent, ToolCallEvent, UserInputEvent
from ..models.tools import ToolCall
from ..thread import Thread
from .llm_client import TextChunkCallback
from .llm_reducer import LLMAgentReducer
from .orchestrator import AgentOrchestrator

log = structlog.get_logger()

ApprovalHandler = Callable[[ToolCall], Awaitable[bool]]


@dataclass
class LoopOutcome:
    """一次 run() / resolve_approval() 的结果"""

    state: LoopState
    thread: Thread
    tool_call: ToolCall | None = None
    message: str = ""


class AgentLoop:
    """LLM -> 分类 -> 审批/执行 -> LLM 的顺序循环"""

    def __init__(
        self,
        orchestrator: AgentOrchestrator,
        reducer: LLMAgentReducer,
        approval_handler: ApprovalHandler | None = None,
        max_steps: int | None = None,
        on_text_chunk: TextChunkCallback | None = None,
        session_id: str | None = None,
    ) -> None:
        """
        Args:
            orchestrator: 负责记录事件与执行 tool call
            reducer: 用于生成下一个 tool call 的 LLM reducer
            approval_handler: 审批回调；None 时循环停在 AWAITING_HUMAN_APPROVAL，
                由 resolve_approval() 继续
            max_steps: 单次 run() 最多向模型请求的次数，None 使用配置值
            on_text_chunk: 设置后，回复用户的消息改为流式说明（client 支持时）
            session_id: 绑定到日志上下文的会话标识，None 时生成 ULID
        """
        self._orchestrator = orchestrator
        self._reducer = reducer
        self._approval_handler = approval_handler
        self._max_steps = max_steps if max_steps is not None else get_max_steps()
        self._on_text_chunk = on_text_chunk
        self._state = LoopState.IDLE
        self._pending: ToolCallEvent | None = None
        self._session_id = session_id or str(ULID())

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def state(self) -> LoopState:
        return self._state

    @property
    def pending_tool_call(self) -> ToolCall | None:
        """等待审批的 tool call"""
        return self._pending.data if self._pending is not None else None

    async def run(self, user_input: str) -> LoopOutcome:
        """记录用户输入并驱动循环直到需要人工介入或结束

        Raises:
            InvalidLoopTransitionError: 仍有待审批的 tool call
            ToolCallGenerationError: LLM 调用失败（循环进入 TERMINAL）
            Exception: 记录事件或审批回调抛出的异常原样向上抛出，循环进入 TERMINAL
        """
        if self._state is LoopState.TERMINAL:
            # 新一轮对话
            self._state = LoopState.IDLE
        self._transition(LoopState.AWAITING_MODEL)

        with structlog.contextvars.bound_contextvars(session_id=self._session_id, intent=None):
            try:
                thread = await self._orchestrator.process_event(UserInputEvent(data=user_input))
                return await self._drive(thread)
            except Exception:
                self._abort()
                raise

    async def resolve_approval(self, approved: bool) -> LoopOutcome:
        """处理挂起的审批请求

        Raises:
            InvalidLoopTransitionError: 当前没有待审批的 tool call
        """
        if self._state is not LoopState.AWAITING_HUMAN_APPROVAL or self._pending is None:
            raise InvalidLoopTransitionError(self._state, LoopState.EXECUTING)

        event, self._pending = self._pending, None
        with structlog.contextvars.bound_contextvars(
            session_id=self._session_id, intent=event.data.intent
        ):
            log.info("approval_resolved", approved=approved)
            if not approved:
                return self._finish(
                    LoopState.TERMINAL,
                    self._orchestrator.get_state(),
                    event.data,
                    "Operation cancelled by user",
                )

            try:
                outcome = await self._execute(event)
                if outcome is not None:
                    return outcome
                return await self._drive(self._orchestrator.get_state())
            except Exception:
                self._abort()
                raise

    async def _drive(self, thread: Thread) -> LoopOutcome:
        steps = 0
        while True:
            if steps >= self._max_steps:
                log.warning("loop_step_budget_exhausted", max_steps=self._max_steps)
                return self._finish(LoopState.TERMINAL, thread, message="Step budget exhausted")
            steps += 1

            event = await self._reducer.generate_next_tool_call(thread)

            if event is None:
                return self._finish(
                    LoopState.TERMINAL, thread, message="Agent finished without tool call"
                )

            tool_call = event.data
            structlog.contextvars.bind_contextvars(intent=tool_call.intent)
            disposition = classify(tool_call)
            log.info("tool_call_classified", disposition=disposition)

            if disposition in (
                ToolCallDisposition.TERMINAL,
                ToolCallDisposition.NEEDS_CLARIFICATION,
            ):
                thread = await self._orchestrator.process_event(event)
                message = await self._explain(thread, tool_call)
                return self._finish(
                    LoopState.AWAITING_HUMAN_RESPONSE, thread, tool_call, message
                )

            if disposition is ToolCallDisposition.NEEDS_APPROVAL:
                self._transition(LoopState.AWAITING_HUMAN_APPROVAL)
                if self._approval_handler is None:
                    self._pending = event
                    return LoopOutcome(
                        state=self._state,
                        thread=thread,
                        tool_call=tool_call,
                        message="Approval required",
                    )
                if not await self._approval_handler(tool_call):
                    return self._finish(
                        LoopState.TERMINAL, thread, tool_call, "Operation cancelled by user"
                    )

            outcome = await self._execute(event)
            if outcome is not None:
                return outcome
            thread = self._orchestrator.get_state()

    async def _execute(self, event: ToolCallEvent) -> LoopOutcome | None:
        """执行 tool call；失败时返回 TERMINAL 结果，成功时回到 AWAITING_MODEL"""
        self._transition(LoopState.EXECUTING)
        thread = await self._orchestrator.execute_tool_call(event)

        last = thread.last_event
        if isinstance(last, ErrorEvent):
            return self._finish(LoopState.TERMINAL, thread, event.data, last.data.error)

        self._transition(LoopState.AWAITING_MODEL)
        return None

    async def _explain(self, thread: Thread, tool_call: ToolCall) -> str:
        """回复用户的消息：优先流式说明，否则使用 tool call 自带的 message"""
        fallback = getattr(tool_call.parameters, "message", "")
        if self._on_text_chunk is None or not self._reducer.capabilities.text_streaming:
            return fallback
        try:
            return await self._reducer.generate_explanation_with_streaming(
                thread, self._on_text_chunk
            )
        except AgentError as e:
            log.warning("explanation_fallback_to_tool_message", error=str(e))
            return fallback

    def _abort(self) -> None:
        """异常中断：丢弃待审批的 tool call 并进入 TERMINAL，之后可以开始新一轮"""
        if self._state is LoopState.TERMINAL:
            return
        log.warning("loop_aborted", from_state=self._state)
        self._pending = None
        self._state = LoopState.TERMINAL

    def _transition(self, to_state: LoopState) -> None:
        if not validate_loop_transition(self._state, to_state):
            raise InvalidLoopTransitionError(self._state, to_state)
        log.debug("loop_transition", from_state=self._state, to_state=to_state)
        self._state = to_state

    def _finish(
        self,
        state: LoopState,
        thread: Thread,
        tool_call: ToolCall | None = None,
        message: str = "",
    ) -> LoopOutcome:
        self._transition(state)
        return LoopOutcome(state=state, thread=thread, tool_call=tool_call, message=message)
