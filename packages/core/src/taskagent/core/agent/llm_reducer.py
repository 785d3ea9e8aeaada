"""LLMAgentReducer -- 借助 LLM 决定下一个 tool call 的 reducer

reduce() 保持纯函数契约（与 ThreadReducer 相同的追加语义）；
generate_* 系列方法是有副作用的辅助方法，由编排方在 reduce 之外调用。
"""

from collections.abc import Callable
from typing import Any

import structlog

from ..exceptions import (
    ExplanationGenerationError,
    StreamingNotSupportedError,
    ToolCallGenerationError,
)
from ..models.event import Event, ToolCallEvent
from ..thread import Thread
from .llm_client import LLMCapabilities, TextChunkCallback, ToolCallLLMClient
from .reducer import append_event

log = structlog.get_logger()

PromptBuilder = Callable[[str], str]


class LLMAgentReducer:
    """基于 LLM 的 AgentReducer 实现

    Args:
        llm_client: 满足 ToolCallLLMClient 契约的客户端
        tools: 可用工具 schema 的封闭列表
        system_prompt_builder: (serialized_thread) -> system prompt
        explanation_prompt_builder: 流式说明使用的 prompt 构造器，
            None 时复用 system_prompt_builder
    """

    def __init__(
        self,
        llm_client: ToolCallLLMClient,
        tools: list[dict[str, Any]],
        system_prompt_builder: PromptBuilder,
        explanation_prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self._llm_client = llm_client
        self._tools = list(tools)
        self._system_prompt_builder = system_prompt_builder
        self._explanation_prompt_builder = explanation_prompt_builder or system_prompt_builder
        self._capabilities = LLMCapabilities.detect(llm_client)

    @property
    def capabilities(self) -> LLMCapabilities:
        return self._capabilities

    def reduce(self, state: Thread, event: Event) -> Thread:
        """把事件追加到 Thread，无副作用"""
        return append_event(state, event)

    def _build_request(self, state: Thread, builder: PromptBuilder) -> tuple[str, list[dict]]:
        system_prompt = builder(state.serialize_for_llm())
        return system_prompt, [{"role": "user", "content": system_prompt}]

    async def generate_next_tool_call(self, state: Thread) -> ToolCallEvent | None:
        """让 LLM 在已知工具集合内选择恰好一个动作

        Returns:
            ToolCallEvent；模型拒绝行动时返回 None

        Raises:
            ToolCallGenerationError: LLM 调用失败（原始异常作为 __cause__）
        """
        system_prompt, input_messages = self._build_request(state, self._system_prompt_builder)

        try:
            result = await self._llm_client.generate_tool_call(
                system_prompt=system_prompt,
                input_messages=input_messages,
                tools=self._tools,
            )
        except Exception as e:
            log.error(
                "tool_call_generation_failed",
                error=str(e),
                error_type=type(e).__name__,
                thread_length=len(state),
            )
            raise ToolCallGenerationError(f"Tool call generation failed: {e}") from e

        return self._to_event(result.tool_call)

    async def generate_next_tool_call_with_streaming(
        self,
        state: Thread,
        on_text_chunk: TextChunkCallback | None = None,
    ) -> ToolCallEvent | None:
        """流式版本的 generate_next_tool_call

        Raises:
            StreamingNotSupportedError: client 不支持流式 tool call
            ToolCallGenerationError: LLM 调用失败
        """
        if not self._capabilities.tool_call_streaming:
            raise StreamingNotSupportedError("LLM client does not support streaming")

        system_prompt, input_messages = self._build_request(state, self._system_prompt_builder)

        try:
            result = await self._llm_client.generate_tool_call_with_streaming(
                system_prompt=system_prompt,
                input_messages=input_messages,
                tools=self._tools,
                on_text_chunk=on_text_chunk,
            )
        except Exception as e:
            log.error(
                "streaming_tool_call_generation_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ToolCallGenerationError(
                f"Streaming tool call generation failed: {e}"
            ) from e

        return self._to_event(result.tool_call)

    async def generate_explanation_with_streaming(
        self,
        state: Thread,
        on_text_chunk: TextChunkCallback | None = None,
    ) -> str:
        """流式生成面向用户的自然语言说明

        Returns:
            完整说明文本

        Raises:
            StreamingNotSupportedError: client 不支持流式文本
            ExplanationGenerationError: LLM 调用失败
        """
        if not self._capabilities.text_streaming:
            raise StreamingNotSupportedError("LLM client does not support text streaming")

        system_prompt, input_messages = self._build_request(
            state, self._explanation_prompt_builder
        )

        try:
            return await self._llm_client.generate_text_with_streaming(
                system_prompt=system_prompt,
                input_messages=input_messages,
                on_text_chunk=on_text_chunk,
            )
        except Exception as e:
            log.error(
                "streaming_explanation_generation_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ExplanationGenerationError(
                f"Streaming explanation generation failed: {e}"
            ) from e

    @staticmethod
    def _to_event(tool_call) -> ToolCallEvent | None:
        if tool_call is None:
            log.info("llm_declined_tool_call")
            return None
        log.debug("tool_call_generated", intent=tool_call.intent)
        return ToolCallEvent(data=tool_call)
