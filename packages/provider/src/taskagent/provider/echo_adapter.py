"""EchoToolCallClient -- 离线 Echo 模式 LLM 协作方

不访问网络：对任意请求返回 done_for_now，message 回显 prompt 中
最后一个 <user_input> 块。用于本地开发与端到端测试。
"""

import asyncio
import re
import time
from typing import Any

from taskagent.core.agent.llm_client import TextChunkCallback
from taskagent.core.models.tools import DoneForNowTool, MessageParameters
from ulid import ULID

from .models import ModelToolCallResult, TokenUsage

_USER_INPUT_BLOCK = re.compile(r"<user_input>\n(.*?)\n</user_input>", re.DOTALL)


class EchoToolCallClient:
    """Echo 模式 client，同时支持两种流式能力"""

    def __init__(self, model_alias: str = "echo") -> None:
        self._model_alias = model_alias

    async def generate_tool_call(
        self,
        *,
        system_prompt: str,
        input_messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
    ) -> ModelToolCallResult:
        return await self._respond(system_prompt, input_messages, on_text_chunk=None)

    async def generate_tool_call_with_streaming(
        self,
        *,
        system_prompt: str,
        input_messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
        on_text_chunk: TextChunkCallback | None = None,
    ) -> ModelToolCallResult:
        return await self._respond(system_prompt, input_messages, on_text_chunk)

    async def generate_text_with_streaming(
        self,
        *,
        system_prompt: str,
        input_messages: list[dict[str, Any]],
        on_text_chunk: TextChunkCallback | None = None,
    ) -> str:
        text = self._echo_text(system_prompt, input_messages)
        self._emit_chunks(text, on_text_chunk)
        return text

    async def _respond(
        self,
        system_prompt: str,
        input_messages: list[dict[str, Any]],
        on_text_chunk: TextChunkCallback | None,
    ) -> ModelToolCallResult:
        start_time = time.monotonic()
        text = self._echo_text(system_prompt, input_messages)

        # 模拟少量延迟
        await asyncio.sleep(0.01)
        self._emit_chunks(text, on_text_chunk)

        # 按 word 简单估算 token
        prompt_tokens = len(system_prompt.split())
        completion_tokens = len(text.split())

        return ModelToolCallResult(
            tool_call=DoneForNowTool(parameters=MessageParameters(message=text)),
            model_alias=self._model_alias,
            model_name="echo",
            provider="echo",
            duration_ms=int((time.monotonic() - start_time) * 1000),
            token_usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
        )

    @classmethod
    def _echo_text(cls, system_prompt: str, input_messages: list[dict[str, Any]]) -> str:
        return f"Echo: {cls._extract_last_user_input(system_prompt, input_messages)}"

    @staticmethod
    def _extract_last_user_input(
        system_prompt: str, input_messages: list[dict[str, Any]]
    ) -> str:
        """提取最后一个 <user_input> 块的内容

        依次查找 input_messages（倒序）与 system_prompt；
        都没有时返回 "(empty)"。
        """
        sources = [
            msg.get("content", "")
            for msg in reversed(input_messages)
            if isinstance(msg.get("content"), str)
        ]
        sources.append(system_prompt)

        for text in sources:
            blocks = _USER_INPUT_BLOCK.findall(text)
            if blocks:
                return blocks[-1] or "(empty)"
        return "(empty)"

    @staticmethod
    def _emit_chunks(text: str, on_text_chunk: TextChunkCallback | None) -> None:
        """按 word 切分推送；各片段拼接后与 text 完全一致"""
        if on_text_chunk is None:
            return
        message_id = str(ULID())
        for chunk in re.findall(r"\S+\s*", text):
            on_text_chunk(chunk, message_id)
