"""人机协作分类器 -- tool call -> ToolCallDisposition

Thread 的尾事件判定与控制循环共用此分类器，
intent 名称列表只在这里出现一次。
"""

from .exceptions import UnknownToolIntentError
from .models.enums import ToolCallDisposition, ToolIntent
from .models.tools import ToolCall


def _to_intent(tool_call_or_intent: ToolCall | str) -> ToolIntent:
    raw = getattr(tool_call_or_intent, "intent", tool_call_or_intent)
    try:
        return ToolIntent(raw)
    except ValueError as e:
        raise UnknownToolIntentError(raw) from e


def classify(tool_call_or_intent: ToolCall | str) -> ToolCallDisposition:
    """判定 tool call 的处理方式

    - done_for_now -> TERMINAL（回复用户后结束本轮）
    - request_more_information -> NEEDS_CLARIFICATION
    - delete_task -> NEEDS_APPROVAL
    - 其余后端 intent -> EXECUTABLE

    Raises:
        UnknownToolIntentError: intent 不在封闭集合内
    """
    intent = _to_intent(tool_call_or_intent)
    match intent:
        case ToolIntent.DONE_FOR_NOW:
            return ToolCallDisposition.TERMINAL
        case ToolIntent.REQUEST_MORE_INFORMATION:
            return ToolCallDisposition.NEEDS_CLARIFICATION
        case ToolIntent.DELETE_TASK:
            return ToolCallDisposition.NEEDS_APPROVAL
        case (
            ToolIntent.CREATE_TASK
            | ToolIntent.CREATE_PROJECT
            | ToolIntent.GET_TASKS
            | ToolIntent.UPDATE_TASK
            | ToolIntent.GET_TASK_DETAILS
        ):
            return ToolCallDisposition.EXECUTABLE
        case _:
            raise UnknownToolIntentError(intent)


def needs_human_response(tool_call_or_intent: ToolCall | str) -> bool:
    """是否需要等待用户回复（done_for_now / request_more_information）"""
    return classify(tool_call_or_intent) in (
        ToolCallDisposition.TERMINAL,
        ToolCallDisposition.NEEDS_CLARIFICATION,
    )


def needs_human_approval(tool_call_or_intent: ToolCall | str) -> bool:
    """是否需要人工审批后才能执行"""
    return classify(tool_call_or_intent) is ToolCallDisposition.NEEDS_APPROVAL
