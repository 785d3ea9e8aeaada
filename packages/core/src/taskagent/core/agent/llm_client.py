"""LLM 协作方契约

core 只依赖调用契约，不依赖具体 provider：
- generate_tool_call：必需能力
- generate_tool_call_with_streaming / generate_text_with_streaming：可选能力

可选能力在构造 LLMAgentReducer 时通过 LLMCapabilities.detect() 一次性确定。
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from ..models.tools import ToolCall

# (chunk, message_id) -> None，在调用返回前按顺序同步触发
TextChunkCallback = Callable[[str, str], None]


class ToolCallResult(BaseModel):
    """generate_tool_call 返回值

    tool_call 为 None 表示模型合理地拒绝行动。
    """

    tool_call: ToolCall | None = Field(default=None, description="模型选择的唯一动作")
    raw_output: list[Any] = Field(default_factory=list, description="provider 原始输出")


@runtime_checkable
class ToolCallLLMClient(Protocol):
    """必需能力：生成恰好一个 tool call"""

    async def generate_tool_call(
        self,
        *,
        system_prompt: str,
        input_messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
    ) -> ToolCallResult: ...


@runtime_checkable
class StreamingToolCallLLMClient(Protocol):
    """可选能力：流式生成 tool call，文本片段通过回调推送"""

    async def generate_tool_call_with_streaming(
        self,
        *,
        system_prompt: str,
        input_messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
        on_text_chunk: TextChunkCallback | None = None,
    ) -> ToolCallResult: ...


@runtime_checkable
class StreamingTextLLMClient(Protocol):
    """可选能力：流式生成自然语言文本"""

    async def generate_text_with_streaming(
        self,
        *,
        system_prompt: str,
        input_messages: list[dict[str, Any]],
        on_text_chunk: TextChunkCallback | None = None,
    ) -> str: ...


class LLMCapabilities(BaseModel):
    """LLM client 能力描述"""

    model_config = ConfigDict(frozen=True)

    tool_call_streaming: bool = False
    text_streaming: bool = False

    @classmethod
    def detect(cls, client: object) -> "LLMCapabilities":
        """检查 client 实现了哪些可选方法"""
        return cls(
            tool_call_streaming=isinstance(client, StreamingToolCallLLMClient),
            text_streaming=isinstance(client, StreamingTextLLMClient),
        )
