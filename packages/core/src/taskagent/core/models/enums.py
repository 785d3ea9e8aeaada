"""枚举定义

包含 EventType、ToolIntent、ToolCallDisposition、LoopState 状态机，
控制类 / 后端类 intent 集合，以及 VALID_LOOP_TRANSITIONS 合法流转映射。
"""

from enum import StrEnum


class EventType(StrEnum):
    """事件类型"""

    USER_INPUT = "user_input"
    TOOL_CALL = "tool_call"
    TOOL_RESPONSE = "tool_response"
    ERROR = "error"
    AWAITING_APPROVAL = "awaiting_approval"
    COMPLETE = "complete"

    # 扩展事件：core 只负责路由，不解释内容
    TEXT_CHUNK = "text_chunk"
    CONNECTED = "connected"


class ToolIntent(StrEnum):
    """ToolCall 判别字段 -- 封闭集合"""

    CREATE_TASK = "create_task"
    CREATE_PROJECT = "create_project"
    GET_TASKS = "get_tasks"
    DELETE_TASK = "delete_task"
    UPDATE_TASK = "update_task"
    GET_TASK_DETAILS = "get_task_details"
    REQUEST_MORE_INFORMATION = "request_more_information"
    DONE_FOR_NOW = "done_for_now"


# 控制类 intent：无后端副作用
CONTROL_INTENTS: frozenset[ToolIntent] = frozenset(
    {
        ToolIntent.REQUEST_MORE_INFORMATION,
        ToolIntent.DONE_FOR_NOW,
    }
)

# 后端类 intent：一一路由到任务后端
BACKEND_INTENTS: frozenset[ToolIntent] = frozenset(ToolIntent) - CONTROL_INTENTS


class ToolCallDisposition(StrEnum):
    """tool call 的人机协作分类"""

    TERMINAL = "terminal"
    NEEDS_APPROVAL = "needs_approval"
    NEEDS_CLARIFICATION = "needs_clarification"
    EXECUTABLE = "executable"


class LoopState(StrEnum):
    """调用方控制循环的状态机"""

    IDLE = "IDLE"
    AWAITING_MODEL = "AWAITING_MODEL"
    AWAITING_HUMAN_RESPONSE = "AWAITING_HUMAN_RESPONSE"
    AWAITING_HUMAN_APPROVAL = "AWAITING_HUMAN_APPROVAL"
    EXECUTING = "EXECUTING"
    TERMINAL = "TERMINAL"


# 合法状态流转
VALID_LOOP_TRANSITIONS: dict[LoopState, set[LoopState]] = {
    LoopState.IDLE: {LoopState.AWAITING_MODEL},
    LoopState.AWAITING_MODEL: {
        LoopState.TERMINAL,
        LoopState.AWAITING_HUMAN_RESPONSE,
        LoopState.AWAITING_HUMAN_APPROVAL,
        LoopState.EXECUTING,
    },
    LoopState.EXECUTING: {LoopState.AWAITING_MODEL, LoopState.TERMINAL},
    LoopState.AWAITING_HUMAN_APPROVAL: {LoopState.EXECUTING, LoopState.TERMINAL},
    LoopState.AWAITING_HUMAN_RESPONSE: {LoopState.AWAITING_MODEL},
    # 终态不可再流转（新一轮对话从 IDLE 重新开始）
    LoopState.TERMINAL: set(),
}


def validate_loop_transition(from_state: LoopState, to_state: LoopState) -> bool:
    """验证状态流转是否合法

    Args:
        from_state: 当前状态
        to_state: 目标状态

    Returns:
        True 如果流转合法，否则 False
    """
    allowed = VALID_LOOP_TRANSITIONS.get(from_state, set())
    return to_state in allowed
