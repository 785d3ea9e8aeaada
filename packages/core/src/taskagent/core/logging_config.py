"""structlog 配置模块

dev 模式：pretty print 可读输出
json 模式：结构化 JSON 输出

AgentLoop 通过 structlog.contextvars 绑定 session_id / intent，
merge_contextvars 把它们带进同一轮内的所有日志（包括 provider 包）。
"""

import logging

import structlog

from .config import get_log_format, get_log_level

# LLM / HTTP 依赖在 INFO 级别输出每个请求，非 DEBUG 时压到 WARNING
NOISY_LOGGERS = ("LiteLLM", "LiteLLM Router", "LiteLLM Proxy", "httpx", "httpcore")

_PACKAGE_PREFIX = "taskagent."


def _shorten_logger_name(
    logger: logging.Logger, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """taskagent.core.agent.loop -> core.agent.loop"""
    name = event_dict.get("logger")
    if isinstance(name, str) and name.startswith(_PACKAGE_PREFIX):
        event_dict["logger"] = name[len(_PACKAGE_PREFIX) :]
    return event_dict


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog 配置

    Args:
        log_format: "json"（生产环境）或 "dev"；None 时读取 TASKAGENT_LOG_FORMAT
        log_level: 日志级别名；None 时读取 TASKAGENT_LOG_LEVEL，未知值按 INFO 处理
    """
    log_format = log_format or get_log_format()
    level = getattr(logging, (log_level or get_log_level()).upper(), None)
    if not isinstance(level, int):
        level = logging.INFO

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        _shorten_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    library_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
