"""Provider 异常体系

所有异常最终在 LLMAgentReducer 边界被包装为 ToolCallGenerationError /
ExplanationGenerationError，原始异常保留在 __cause__ 中。
"""


class ProviderError(Exception):
    """Provider 包基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 是否可通过重试恢复
        """
        super().__init__(message)
        self.recoverable = recoverable


class ProxyUnreachableError(ProviderError):
    """LiteLLM Proxy 不可达（连接失败、超时、DNS 解析失败等）"""

    def __init__(self, proxy_url: str, original_error: Exception) -> None:
        """
        Args:
            proxy_url: 尝试连接的 Proxy 地址
            original_error: 原始异常
        """
        super().__init__(
            f"LiteLLM Proxy 不可达: {proxy_url} -- {original_error}",
            recoverable=True,
        )
        self.proxy_url = proxy_url
        self.original_error = original_error


class ToolCallValidationError(ProviderError):
    """模型返回的 function call 不符合 ToolCall schema

    重试通常得到同样的结果，因此标记为不可恢复。
    """

    def __init__(self, raw_tool_call: object, validation_errors: list[str]) -> None:
        """
        Args:
            raw_tool_call: 校验前的 {"intent", "parameters"} 结构
            validation_errors: "path: message" 形式的错误列表
        """
        super().__init__(
            f"Invalid tool call from LLM: {', '.join(validation_errors)}",
            recoverable=False,
        )
        self.raw_tool_call = raw_tool_call
        self.validation_errors = validation_errors
