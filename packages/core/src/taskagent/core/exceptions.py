"""Core 异常体系

分三类：
- 能力缺失（StreamingNotSupportedError）：立即抛出，不重试
- 协作方故障（ToolCallGenerationError 等）：在 LLM reducer 边界重新包装后上报
- 内部错误（UnknownToolIntentError、EventSerializationError）：不允许静默忽略
"""


class AgentError(Exception):
    """Core 包基础异常"""

    def __init__(self, message: str, recoverable: bool = False) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 调用方是否可以通过重试恢复
        """
        super().__init__(message)
        self.recoverable = recoverable


class UnknownToolIntentError(AgentError):
    """ToolCall intent 不在封闭集合内

    动作词表与处理器之间出现 schema 漂移时触发，属于致命内部错误。
    """

    def __init__(self, intent: object) -> None:
        super().__init__(f"Unknown tool intent: {intent}", recoverable=False)
        self.intent = intent


class EventSerializationError(AgentError):
    """事件序列化失败（event.data 恰好为 None）"""

    def __init__(self, event_type: str) -> None:
        super().__init__(
            f"Cannot serialize '{event_type}' event: data is None",
            recoverable=False,
        )
        self.event_type = event_type


class StreamingNotSupportedError(AgentError):
    """LLM client 不具备所需的流式能力"""

    def __init__(self, message: str = "LLM client does not support streaming") -> None:
        super().__init__(message, recoverable=False)


class ToolCallGenerationError(AgentError):
    """LLM 生成下一个 tool call 失败"""

    def __init__(self, message: str) -> None:
        super().__init__(message, recoverable=True)


class ExplanationGenerationError(AgentError):
    """LLM 流式生成说明文本失败"""

    def __init__(self, message: str) -> None:
        super().__init__(message, recoverable=True)


class InvalidLoopTransitionError(AgentError):
    """控制循环出现非法状态流转（调用顺序错误）"""

    def __init__(self, from_state: str, to_state: str) -> None:
        super().__init__(
            f"Invalid loop transition: {from_state} -> {to_state}",
            recoverable=False,
        )
        self.from_state = from_state
        self.to_state = to_state
