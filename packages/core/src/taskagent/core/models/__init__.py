"""taskagent Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    BACKEND_INTENTS,
    CONTROL_INTENTS,
    VALID_LOOP_TRANSITIONS,
    EventType,
    LoopState,
    ToolCallDisposition,
    ToolIntent,
    validate_loop_transition,
)
from .event import (
    AwaitingApprovalEvent,
    CompleteData,
    CompleteEvent,
    ConnectedData,
    ConnectedEvent,
    ErrorData,
    ErrorEvent,
    Event,
    TextChunkData,
    TextChunkEvent,
    ToolCallEvent,
    ToolResponseEvent,
    UserInputEvent,
    parse_event,
)
from .tools import (
    CreateProjectParameters,
    CreateProjectTool,
    CreateTaskParameters,
    CreateTaskTool,
    DeleteTaskParameters,
    DeleteTaskTool,
    DoneForNowTool,
    GetTaskDetailsParameters,
    GetTaskDetailsTool,
    GetTasksParameters,
    GetTasksTool,
    Importance,
    MessageParameters,
    RequestMoreInformationTool,
    TaskType,
    ToolCall,
    UpdateTaskParameters,
    UpdateTaskTool,
    build_tool_schemas,
    parse_tool_call,
)

__all__ = [
    # 枚举
    "EventType",
    "ToolIntent",
    "ToolCallDisposition",
    "CONTROL_INTENTS",
    "BACKEND_INTENTS",
    # 控制循环状态机
    "LoopState",
    "VALID_LOOP_TRANSITIONS",
    "validate_loop_transition",
    # Event
    "Event",
    "UserInputEvent",
    "ToolCallEvent",
    "ToolResponseEvent",
    "ErrorEvent",
    "ErrorData",
    "AwaitingApprovalEvent",
    "CompleteEvent",
    "CompleteData",
    "TextChunkEvent",
    "TextChunkData",
    "ConnectedEvent",
    "ConnectedData",
    "parse_event",
    # ToolCall
    "ToolCall",
    "TaskType",
    "Importance",
    "CreateTaskTool",
    "CreateTaskParameters",
    "CreateProjectTool",
    "CreateProjectParameters",
    "GetTasksTool",
    "GetTasksParameters",
    "DeleteTaskTool",
    "DeleteTaskParameters",
    "UpdateTaskTool",
    "UpdateTaskParameters",
    "GetTaskDetailsTool",
    "GetTaskDetailsParameters",
    "RequestMoreInformationTool",
    "DoneForNowTool",
    "MessageParameters",
    "parse_tool_call",
    "build_tool_schemas",
]
