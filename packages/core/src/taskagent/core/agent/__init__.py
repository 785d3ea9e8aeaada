"""taskagent Core Agent -- reducer / executor / orchestrator / 控制循环"""

from .executor import NotionToolExecutor, TaskBackend, ToolExecutionResult, ToolExecutor
from .llm_client import (
    LLMCapabilities,
    StreamingTextLLMClient,
    StreamingToolCallLLMClient,
    TextChunkCallback,
    ToolCallLLMClient,
    ToolCallResult,
)
from .llm_reducer import LLMAgentReducer
from .loop import AgentLoop, ApprovalHandler, LoopOutcome
from .orchestrator import AgentOrchestrator
from .reducer import AgentReducer, ThreadReducer, append_event

__all__ = [
    # Reducer
    "AgentReducer",
    "ThreadReducer",
    "LLMAgentReducer",
    "append_event",
    # LLM 协作方契约
    "ToolCallLLMClient",
    "StreamingToolCallLLMClient",
    "StreamingTextLLMClient",
    "ToolCallResult",
    "TextChunkCallback",
    "LLMCapabilities",
    # Executor
    "ToolExecutor",
    "ToolExecutionResult",
    "TaskBackend",
    "NotionToolExecutor",
    # 编排
    "AgentOrchestrator",
    "AgentLoop",
    "ApprovalHandler",
    "LoopOutcome",
]
