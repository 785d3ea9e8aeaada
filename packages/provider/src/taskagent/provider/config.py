"""ProviderConfig -- Provider 配置加载

从环境变量加载配置，不硬编码 provider/模型名。
"""

import os
from typing import Literal

import structlog
from pydantic import BaseModel, Field, SecretStr

from .client import LiteLLMToolCallClient
from .echo_adapter import EchoToolCallClient

log = structlog.get_logger()


class ProviderConfig(BaseModel):
    """Provider 包配置 -- 从环境变量加载

    环境变量:
        LITELLM_PROXY_URL: Proxy 地址（默认 http://localhost:4000）
        LITELLM_PROXY_KEY: Proxy 访问密钥
        TASKAGENT_LLM_MODE: LLM 运行模式（litellm/echo）
        TASKAGENT_LLM_MODEL: Proxy 上的模型别名（默认 main）
        TASKAGENT_LLM_TIMEOUT_S: 调用超时（秒，默认 30）
    """

    proxy_base_url: str = Field(
        default="http://localhost:4000",
        description="LiteLLM Proxy 基础 URL",
    )
    proxy_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Proxy 访问密钥（不是 LLM provider API key）",
    )
    llm_mode: Literal["litellm", "echo"] = Field(
        default="litellm",
        description="LLM 运行模式：litellm / echo",
    )
    model_alias: str = Field(
        default="main",
        description="Proxy 上配置的模型别名",
    )
    timeout_s: int = Field(
        default=30,
        ge=1,
        description="LLM 调用超时（秒）",
    )


def load_provider_config() -> ProviderConfig:
    """从环境变量加载 Provider 配置

    环境变量映射:
        LITELLM_PROXY_URL -> proxy_base_url (默认 "http://localhost:4000")
        LITELLM_PROXY_KEY -> proxy_api_key (默认 "")
        TASKAGENT_LLM_MODE -> llm_mode (默认 "litellm")
        TASKAGENT_LLM_MODEL -> model_alias (默认 "main")
        TASKAGENT_LLM_TIMEOUT_S -> timeout_s (默认 30)

    Returns:
        ProviderConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("LITELLM_PROXY_URL"):
        kwargs["proxy_base_url"] = val

    if val := os.environ.get("LITELLM_PROXY_KEY"):
        kwargs["proxy_api_key"] = SecretStr(val)

    if val := os.environ.get("TASKAGENT_LLM_MODE"):
        kwargs["llm_mode"] = val

    if val := os.environ.get("TASKAGENT_LLM_MODEL"):
        kwargs["model_alias"] = val

    if val := os.environ.get("TASKAGENT_LLM_TIMEOUT_S"):
        try:
            kwargs["timeout_s"] = int(val)
        except ValueError:
            log.warning(
                "invalid_timeout_config",
                env_var="TASKAGENT_LLM_TIMEOUT_S",
                value=val,
                fallback=30,
            )

    return ProviderConfig(**kwargs)


def create_llm_client(
    config: ProviderConfig | None = None,
) -> LiteLLMToolCallClient | EchoToolCallClient:
    """按 llm_mode 构造 LLM client；config 为 None 时从环境变量加载"""
    config = config or load_provider_config()
    if config.llm_mode == "echo":
        log.info("llm_client_created", llm_mode="echo")
        return EchoToolCallClient()

    log.info(
        "llm_client_created",
        llm_mode="litellm",
        proxy_base_url=config.proxy_base_url,
        model_alias=config.model_alias,
    )
    return LiteLLMToolCallClient(
        proxy_base_url=config.proxy_base_url,
        proxy_api_key=config.proxy_api_key.get_secret_value(),
        model_alias=config.model_alias,
        timeout_s=config.timeout_s,
    )
