"""LiteLLMToolCallClient -- 通过 LiteLLM Proxy 生成 tool call

实现 core 的三个 LLM 协作方方法：
- generate_tool_call：tool_choice="required"，取第一个 function call
- generate_tool_call_with_streaming：累积 tool call 增量，文本增量推送给回调
- generate_text_with_streaming：不带工具的流式文本
"""

import json
import time
from typing import Any

import httpx
import structlog
from litellm import acompletion
from pydantic import ValidationError
from taskagent.core.agent.llm_client import TextChunkCallback
from taskagent.core.models.tools import parse_tool_call
from ulid import ULID

from .exceptions import ProviderError, ProxyUnreachableError, ToolCallValidationError
from .models import ModelToolCallResult, TokenUsage

log = structlog.get_logger()

# 健康检查超时（硬编码，应快速响应）
HEALTH_CHECK_TIMEOUT_S = 5

# 连接类异常类型集合（触发 ProxyUnreachableError）
_CONNECTION_ERROR_TYPES = (
    ConnectionError,
    OSError,
    TimeoutError,
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.TimeoutException,
)


def _is_connection_error(e: Exception) -> bool:
    """判断异常是否为连接类错误（Proxy 不可达）"""
    if isinstance(e, _CONNECTION_ERROR_TYPES):
        return True
    # LiteLLM 的 APIConnectionError 也属于连接类错误
    error_name = type(e).__name__
    return error_name in ("APIConnectionError", "APITimeoutError")


def _parse_function_call(name: str, arguments: str | None) -> Any:
    """function call (name, JSON arguments) -> ToolCall

    Raises:
        ToolCallValidationError: arguments 不是合法 JSON 或不符合 schema
    """
    try:
        parameters = json.loads(arguments) if arguments else {}
    except json.JSONDecodeError as e:
        raw = {"intent": name, "parameters": arguments}
        raise ToolCallValidationError(raw, [f"parameters: invalid JSON ({e.msg})"]) from e

    raw_tool_call = {"intent": name, "parameters": parameters}
    try:
        return parse_tool_call(raw_tool_call)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        ]
        raise ToolCallValidationError(raw_tool_call, errors) from e


def _parse_usage(response: Any) -> TokenUsage:
    usage = getattr(response, "usage", None)
    if usage is None:
        return TokenUsage()
    return TokenUsage(
        prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
        completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
        total_tokens=getattr(usage, "total_tokens", 0) or 0,
    )


def _extract_provider(response: Any) -> str:
    hidden = getattr(response, "_hidden_params", None)
    if isinstance(hidden, dict):
        return hidden.get("custom_llm_provider", "") or ""
    return ""


class LiteLLMToolCallClient:
    """LiteLLM Proxy 客户端

    注意: proxy_api_key 是 Proxy 访问密钥，不是 LLM provider API key。
    """

    def __init__(
        self,
        proxy_base_url: str = "http://localhost:4000",
        proxy_api_key: str = "",
        model_alias: str = "main",
        timeout_s: int = 30,
    ) -> None:
        self._proxy_base_url = proxy_base_url.rstrip("/")
        self._proxy_api_key = proxy_api_key
        self._model_alias = model_alias
        self._timeout_s = timeout_s

    def _call_kwargs(self, messages: list[dict[str, Any]], **kwargs: Any) -> dict[str, Any]:
        return {
            "model": f"openai/{self._model_alias}",
            "messages": messages,
            "api_base": self._proxy_base_url,
            "api_key": self._proxy_api_key or "no-key",
            "timeout": self._timeout_s,
            **kwargs,
        }

    @staticmethod
    def _messages(system_prompt: str, input_messages: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [{"role": "system", "content": system_prompt}, *input_messages]

    def _wrap_error(self, e: Exception, operation: str, start_time: float) -> ProviderError:
        """将 SDK 异常转换为 Provider 异常"""
        duration_ms = int((time.monotonic() - start_time) * 1000)
        log.error(
            "litellm_call_failed",
            operation=operation,
            model_alias=self._model_alias,
            error=str(e),
            error_type=type(e).__name__,
            duration_ms=duration_ms,
        )
        if _is_connection_error(e):
            return ProxyUnreachableError(proxy_url=self._proxy_base_url, original_error=e)
        return ProviderError(message=f"LLM 调用失败: {e}", recoverable=True)

    async def generate_tool_call(
        self,
        *,
        system_prompt: str,
        input_messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
    ) -> ModelToolCallResult:
        """非流式生成恰好一个 tool call

        Returns:
            ModelToolCallResult；模型未返回 function call 时 tool_call 为 None

        Raises:
            ProxyUnreachableError: Proxy 连接失败或超时
            ToolCallValidationError: function call 不符合 ToolCall schema
            ProviderError: Proxy 返回错误
        """
        start_time = time.monotonic()
        messages = self._messages(system_prompt, input_messages)

        log.debug(
            "litellm_call_start",
            operation="generate_tool_call",
            model_alias=self._model_alias,
            message_count=len(messages),
        )
        try:
            response = await acompletion(
                **self._call_kwargs(messages, tools=tools, tool_choice="required")
            )
        except Exception as e:
            raise self._wrap_error(e, "generate_tool_call", start_time) from e

        duration_ms = int((time.monotonic() - start_time) * 1000)
        message = response.choices[0].message
        tool_calls = getattr(message, "tool_calls", None) or []

        tool_call = None
        if tool_calls:
            function = tool_calls[0].function
            tool_call = _parse_function_call(function.name, function.arguments)

        log.info(
            "litellm_call_completed",
            operation="generate_tool_call",
            model_alias=self._model_alias,
            model_name=getattr(response, "model", ""),
            intent=tool_call.intent if tool_call is not None else None,
            duration_ms=duration_ms,
        )
        return ModelToolCallResult(
            tool_call=tool_call,
            raw_output=[message],
            model_alias=self._model_alias,
            model_name=getattr(response, "model", "") or "",
            provider=_extract_provider(response),
            duration_ms=duration_ms,
            token_usage=_parse_usage(response),
        )

    async def generate_tool_call_with_streaming(
        self,
        *,
        system_prompt: str,
        input_messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
        on_text_chunk: TextChunkCallback | None = None,
    ) -> ModelToolCallResult:
        """流式生成 tool call

        文本增量按到达顺序同步推送给 on_text_chunk；
        tool call 的 name / arguments 增量按 index 累积，流结束后取最小 index 的一个。
        """
        start_time = time.monotonic()
        messages = self._messages(system_prompt, input_messages)

        # index -> {"name": ..., "arguments": ...}
        pending: dict[int, dict[str, str]] = {}
        message_id: str | None = None
        chunks: list[Any] = []

        try:
            stream = await acompletion(
                **self._call_kwargs(messages, tools=tools, tool_choice="required", stream=True)
            )
            async for chunk in stream:
                chunks.append(chunk)
                if message_id is None:
                    message_id = getattr(chunk, "id", None) or str(ULID())
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta

                content = getattr(delta, "content", None)
                if content and on_text_chunk is not None:
                    on_text_chunk(content, message_id)

                for tc in getattr(delta, "tool_calls", None) or []:
                    slot = pending.setdefault(tc.index or 0, {"name": "", "arguments": ""})
                    if tc.function.name:
                        slot["name"] += tc.function.name
                    if tc.function.arguments:
                        slot["arguments"] += tc.function.arguments
        except Exception as e:
            raise self._wrap_error(e, "generate_tool_call_with_streaming", start_time) from e

        duration_ms = int((time.monotonic() - start_time) * 1000)
        tool_call = None
        if pending:
            first = pending[min(pending)]
            tool_call = _parse_function_call(first["name"], first["arguments"])

        log.info(
            "litellm_stream_completed",
            operation="generate_tool_call_with_streaming",
            model_alias=self._model_alias,
            chunk_count=len(chunks),
            intent=tool_call.intent if tool_call is not None else None,
            duration_ms=duration_ms,
        )
        return ModelToolCallResult(
            tool_call=tool_call,
            raw_output=chunks,
            model_alias=self._model_alias,
            duration_ms=duration_ms,
        )

    async def generate_text_with_streaming(
        self,
        *,
        system_prompt: str,
        input_messages: list[dict[str, Any]],
        on_text_chunk: TextChunkCallback | None = None,
    ) -> str:
        """流式生成自然语言文本，返回完整文本"""
        start_time = time.monotonic()
        messages = self._messages(system_prompt, input_messages)

        parts: list[str] = []
        message_id: str | None = None
        try:
            stream = await acompletion(**self._call_kwargs(messages, stream=True))
            async for chunk in stream:
                if message_id is None:
                    message_id = getattr(chunk, "id", None) or str(ULID())
                if not chunk.choices:
                    continue
                content = getattr(chunk.choices[0].delta, "content", None)
                if not content:
                    continue
                parts.append(content)
                if on_text_chunk is not None:
                    on_text_chunk(content, message_id)
        except Exception as e:
            raise self._wrap_error(e, "generate_text_with_streaming", start_time) from e

        log.info(
            "litellm_stream_completed",
            operation="generate_text_with_streaming",
            model_alias=self._model_alias,
            chunk_count=len(parts),
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )
        return "".join(parts)

    async def health_check(self) -> bool:
        """检查 LiteLLM Proxy 可达性

        发送 GET {proxy_base_url}/health/liveliness 请求。

        注意: 此方法不抛出异常，所有异常内部捕获并返回 False。
        """
        url = f"{self._proxy_base_url}/health/liveliness"
        try:
            async with httpx.AsyncClient() as http_client:
                resp = await http_client.get(url, timeout=HEALTH_CHECK_TIMEOUT_S)
                return resp.status_code == 200
        except Exception as e:
            log.debug("health_check_failed", url=url, error=str(e))
            return False
