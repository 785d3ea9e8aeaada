"""数据模型 -- TokenUsage + ModelToolCallResult"""

from pydantic import BaseModel, Field
from taskagent.core.agent.llm_client import ToolCallResult


class TokenUsage(BaseModel):
    """Token 使用统计

    key 命名对齐 OpenAI/LiteLLM 行业标准：
    prompt_tokens / completion_tokens / total_tokens
    """

    prompt_tokens: int = Field(default=0, ge=0, description="输入 token 数")
    completion_tokens: int = Field(default=0, ge=0, description="输出 token 数")
    total_tokens: int = Field(default=0, ge=0, description="总 token 数")


class ModelToolCallResult(ToolCallResult):
    """带路由与用量信息的 ToolCallResult

    core 只读取 tool_call / raw_output，其余字段供日志与调用方使用。
    """

    # 路由信息
    model_alias: str = Field(default="", description="请求时使用的模型别名")
    model_name: str = Field(default="", description="实际调用的模型名称（如 gpt-4o-mini）")
    provider: str = Field(default="", description="实际 provider（如 openai/anthropic）")

    # 性能指标
    duration_ms: int = Field(default=0, ge=0, description="端到端耗时（毫秒）")

    # Token 使用
    token_usage: TokenUsage = Field(
        default_factory=TokenUsage,
        description="Token 使用详情",
    )
