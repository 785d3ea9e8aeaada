"""全局 pytest 配置 -- 隔离 taskagent 相关环境变量"""

import pytest

_TASKAGENT_ENV_VARS = (
    "TASKAGENT_MAX_STEPS",
    "TASKAGENT_LOG_FORMAT",
    "TASKAGENT_LOG_LEVEL",
    "TASKAGENT_LLM_MODE",
    "TASKAGENT_LLM_MODEL",
    "TASKAGENT_LLM_TIMEOUT_S",
    "LITELLM_PROXY_URL",
    "LITELLM_PROXY_KEY",
)


@pytest.fixture(autouse=True)
def clean_taskagent_env(monkeypatch):
    """每个测试开始时清除会影响配置的环境变量"""
    for name in _TASKAGENT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
