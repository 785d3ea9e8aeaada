"""taskagent Core -- 事件溯源的任务自动化 agent 内核

公共接口从此入口导入；provider 相关实现位于 taskagent.provider。
"""

from . import gating
from .agent import (
    AgentLoop,
    AgentOrchestrator,
    AgentReducer,
    LLMAgentReducer,
    LLMCapabilities,
    LoopOutcome,
    NotionToolExecutor,
    TaskBackend,
    ThreadReducer,
    ToolCallLLMClient,
    ToolCallResult,
    ToolExecutionResult,
    ToolExecutor,
)
from .exceptions import (
    AgentError,
    EventSerializationError,
    ExplanationGenerationError,
    InvalidLoopTransitionError,
    StreamingNotSupportedError,
    ToolCallGenerationError,
    UnknownToolIntentError,
)
from .logging_config import setup_logging
from .prompts import build_explanation_prompt, build_system_prompt
from .store import InMemoryStateStore, StateStore
from .thread import Thread

__all__ = [
    "Thread",
    "gating",
    # Agent
    "AgentReducer",
    "ThreadReducer",
    "LLMAgentReducer",
    "ToolCallLLMClient",
    "ToolCallResult",
    "LLMCapabilities",
    "ToolExecutor",
    "ToolExecutionResult",
    "TaskBackend",
    "NotionToolExecutor",
    "AgentOrchestrator",
    "AgentLoop",
    "LoopOutcome",
    # Store
    "StateStore",
    "InMemoryStateStore",
    # Prompt
    "build_system_prompt",
    "build_explanation_prompt",
    # 异常
    "AgentError",
    "UnknownToolIntentError",
    "EventSerializationError",
    "StreamingNotSupportedError",
    "ToolCallGenerationError",
    "ExplanationGenerationError",
    "InvalidLoopTransitionError",
    # 日志
    "setup_logging",
]
