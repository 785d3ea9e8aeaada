"""配置常量模块 -- 可通过环境变量覆盖"""

import os

import structlog

log = structlog.get_logger()

DEFAULT_MAX_STEPS = 20


def get_max_steps() -> int:
    """控制循环单次 run() 允许的最大 LLM 决策次数"""
    raw = os.environ.get("TASKAGENT_MAX_STEPS")
    if raw is None:
        return DEFAULT_MAX_STEPS
    try:
        value = int(raw)
    except ValueError:
        log.warning(
            "invalid_max_steps_config",
            env_var="TASKAGENT_MAX_STEPS",
            value=raw,
            fallback=DEFAULT_MAX_STEPS,
        )
        return DEFAULT_MAX_STEPS
    return max(value, 1)


def get_log_format() -> str:
    """日志渲染模式：dev（默认）/ json"""
    return os.environ.get("TASKAGENT_LOG_FORMAT", "dev")


def get_log_level() -> str:
    """日志级别，默认 INFO"""
    return os.environ.get("TASKAGENT_LOG_LEVEL", "INFO")
