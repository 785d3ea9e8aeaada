"""LLMAgentReducer 单元测试

测试内容：
1. reduce() 纯追加语义
2. generate_next_tool_call 请求构造与错误包装
3. 流式方法的能力检测
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from taskagent.core.agent.llm_client import LLMCapabilities, ToolCallResult
from taskagent.core.agent.llm_reducer import LLMAgentReducer
from taskagent.core.exceptions import (
    ExplanationGenerationError,
    StreamingNotSupportedError,
    ToolCallGenerationError,
)
from taskagent.core.models import ToolCallEvent, UserInputEvent, build_tool_schemas
from taskagent.core.thread import Thread


class BasicClient:
    """只实现必需能力的 LLM client"""

    def __init__(self, result: ToolCallResult | None = None) -> None:
        self.result = result or ToolCallResult()
        self.calls: list[dict] = []

    async def generate_tool_call(self, *, system_prompt, input_messages, tools):
        self.calls.append(
            {"system_prompt": system_prompt, "input_messages": input_messages, "tools": tools}
        )
        return self.result


def _prompt(context: str) -> str:
    return f"SYSTEM\n{context}"


def _explain(context: str) -> str:
    return f"EXPLAIN\n{context}"


@pytest.fixture
def thread() -> Thread:
    return Thread([UserInputEvent(data="Add a task to buy milk")])


@pytest.fixture
def streaming_client(create_task_call) -> SimpleNamespace:
    """三种能力都具备的 client（方法为实例属性，满足 Protocol 检查）"""
    result = ToolCallResult(tool_call=create_task_call)
    return SimpleNamespace(
        generate_tool_call=AsyncMock(return_value=result),
        generate_tool_call_with_streaming=AsyncMock(return_value=result),
        generate_text_with_streaming=AsyncMock(return_value="I created the task."),
    )


class TestCapabilities:
    """能力检测测试"""

    def test_basic_client(self):
        """只有 generate_tool_call 时两个流式能力都为 False"""
        reducer = LLMAgentReducer(BasicClient(), [], _prompt)
        assert reducer.capabilities == LLMCapabilities()

    def test_streaming_client(self, streaming_client):
        """实现全部方法时两个流式能力都为 True"""
        reducer = LLMAgentReducer(streaming_client, [], _prompt)
        assert reducer.capabilities.tool_call_streaming is True
        assert reducer.capabilities.text_streaming is True


class TestReduce:
    """reduce() 测试"""

    def test_reduce_appends_without_llm_call(self, streaming_client, thread, create_task_call):
        """reduce 不调用 LLM"""
        reducer = LLMAgentReducer(streaming_client, [], _prompt)
        event = ToolCallEvent(data=create_task_call)

        new_state = reducer.reduce(thread, event)

        assert new_state.events == (*thread.events, event)
        assert len(thread) == 1
        streaming_client.generate_tool_call.assert_not_called()


class TestGenerateNextToolCall:
    """generate_next_tool_call() 测试"""

    async def test_returns_tool_call_event(self, thread, create_task_call):
        """返回包装好的 ToolCallEvent"""
        client = BasicClient(ToolCallResult(tool_call=create_task_call))
        reducer = LLMAgentReducer(client, build_tool_schemas(), _prompt)

        event = await reducer.generate_next_tool_call(thread)

        assert isinstance(event, ToolCallEvent)
        assert event.data == create_task_call

    async def test_request_shape(self, thread, create_task_call):
        """system prompt 由序列化结果构造，同时作为唯一的 user 消息"""
        client = BasicClient(ToolCallResult(tool_call=create_task_call))
        tools = build_tool_schemas()
        reducer = LLMAgentReducer(client, tools, _prompt)

        await reducer.generate_next_tool_call(thread)

        call = client.calls[0]
        expected_prompt = _prompt(thread.serialize_for_llm())
        assert call["system_prompt"] == expected_prompt
        assert call["input_messages"] == [{"role": "user", "content": expected_prompt}]
        assert call["tools"] == tools

    async def test_declined_returns_none(self, thread):
        """模型未给出 tool call 时返回 None"""
        reducer = LLMAgentReducer(BasicClient(ToolCallResult(tool_call=None)), [], _prompt)
        assert await reducer.generate_next_tool_call(thread) is None

    async def test_collaborator_failure_wrapped(self, thread, streaming_client):
        """client 异常包装为 ToolCallGenerationError，原始异常保留"""
        cause = RuntimeError("API Error")
        streaming_client.generate_tool_call.side_effect = cause
        reducer = LLMAgentReducer(streaming_client, [], _prompt)

        with pytest.raises(ToolCallGenerationError) as exc_info:
            await reducer.generate_next_tool_call(thread)

        assert str(exc_info.value) == "Tool call generation failed: API Error"
        assert exc_info.value.__cause__ is cause
        assert exc_info.value.recoverable is True

    async def test_state_not_modified(self, thread, streaming_client):
        """生成 tool call 不修改输入 Thread"""
        reducer = LLMAgentReducer(streaming_client, [], _prompt)
        await reducer.generate_next_tool_call(thread)
        assert len(thread) == 1


class TestGenerateNextToolCallWithStreaming:
    """generate_next_tool_call_with_streaming() 测试"""

    async def test_not_supported(self, thread):
        """client 不支持流式时立即失败且不调用 client"""
        client = BasicClient()
        reducer = LLMAgentReducer(client, [], _prompt)

        with pytest.raises(StreamingNotSupportedError, match="does not support streaming"):
            await reducer.generate_next_tool_call_with_streaming(thread)

        assert client.calls == []

    async def test_callback_forwarded(self, thread, streaming_client, create_task_call):
        """回调原样传给 client"""
        reducer = LLMAgentReducer(streaming_client, [], _prompt)
        chunks: list[tuple[str, str]] = []

        def on_chunk(chunk: str, message_id: str) -> None:
            chunks.append((chunk, message_id))

        event = await reducer.generate_next_tool_call_with_streaming(thread, on_chunk)

        assert event is not None
        assert event.data == create_task_call
        kwargs = streaming_client.generate_tool_call_with_streaming.call_args.kwargs
        assert kwargs["on_text_chunk"] is on_chunk

    async def test_failure_wrapped(self, thread, streaming_client):
        """流式调用失败包装为 ToolCallGenerationError"""
        streaming_client.generate_tool_call_with_streaming.side_effect = RuntimeError("Stream Error")
        reducer = LLMAgentReducer(streaming_client, [], _prompt)

        with pytest.raises(
            ToolCallGenerationError, match="Streaming tool call generation failed: Stream Error"
        ):
            await reducer.generate_next_tool_call_with_streaming(thread)


class TestGenerateExplanationWithStreaming:
    """generate_explanation_with_streaming() 测试"""

    async def test_not_supported(self, thread):
        """client 不支持文本流式时失败"""
        reducer = LLMAgentReducer(BasicClient(), [], _prompt)

        with pytest.raises(StreamingNotSupportedError, match="does not support text streaming"):
            await reducer.generate_explanation_with_streaming(thread)

    async def test_uses_explanation_prompt(self, thread, streaming_client):
        """使用说明专用 prompt 构造器并返回完整文本"""
        reducer = LLMAgentReducer(streaming_client, [], _prompt, _explain)

        text = await reducer.generate_explanation_with_streaming(thread)

        assert text == "I created the task."
        kwargs = streaming_client.generate_text_with_streaming.call_args.kwargs
        assert kwargs["system_prompt"] == _explain(thread.serialize_for_llm())
        assert "tools" not in kwargs

    async def test_falls_back_to_system_prompt_builder(self, thread, streaming_client):
        """未提供说明 prompt 构造器时复用 system prompt 构造器"""
        reducer = LLMAgentReducer(streaming_client, [], _prompt)

        await reducer.generate_explanation_with_streaming(thread)

        kwargs = streaming_client.generate_text_with_streaming.call_args.kwargs
        assert kwargs["system_prompt"] == _prompt(thread.serialize_for_llm())

    async def test_failure_wrapped(self, thread, streaming_client):
        """说明生成失败包装为 ExplanationGenerationError"""
        streaming_client.generate_text_with_streaming.side_effect = RuntimeError("Text Error")
        reducer = LLMAgentReducer(streaming_client, [], _prompt)

        with pytest.raises(
            ExplanationGenerationError, match="Streaming explanation generation failed: Text Error"
        ):
            await reducer.generate_explanation_with_streaming(thread)
