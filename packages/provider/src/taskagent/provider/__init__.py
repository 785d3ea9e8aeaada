"""taskagent Provider -- LLM 调用抽象层

packages/provider 的公开接口导出。
"""

# 核心组件
from .client import LiteLLMToolCallClient

# 配置
from .config import ProviderConfig, create_llm_client, load_provider_config
from .echo_adapter import EchoToolCallClient

# 异常
from .exceptions import ProviderError, ProxyUnreachableError, ToolCallValidationError

# 数据模型
from .models import ModelToolCallResult, TokenUsage

__all__ = [
    "ModelToolCallResult",
    "TokenUsage",
    "LiteLLMToolCallClient",
    "EchoToolCallClient",
    "ProviderConfig",
    "load_provider_config",
    "create_llm_client",
    "ProviderError",
    "ProxyUnreachableError",
    "ToolCallValidationError",
]
