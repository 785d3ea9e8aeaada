"""ToolExecutor -- 副作用边界

reducer 只负责纯状态迁移；所有外部调用（任务后端 API 等）集中在 executor。
execute() 不抛异常：所有故障在此边界转换为 error 事件。
"""

from typing import Any, Protocol

import structlog
from pydantic import BaseModel, ConfigDict

from ..exceptions import UnknownToolIntentError
from ..models.enums import CONTROL_INTENTS
from ..models.event import ErrorData, ErrorEvent, ToolResponseEvent
from ..models.tools import (
    CreateProjectTool,
    CreateTaskTool,
    DeleteTaskTool,
    GetTaskDetailsTool,
    GetTasksTool,
    ToolCall,
    UpdateTaskTool,
)

log = structlog.get_logger()


class ToolExecutionResult(BaseModel):
    """工具执行结果 -- 待追加到 Thread 的事件"""

    model_config = ConfigDict(frozen=True)

    event: ToolResponseEvent | ErrorEvent


class ToolExecutor(Protocol):
    """工具执行接口"""

    async def execute(self, tool_call: ToolCall) -> ToolExecutionResult:
        """执行 tool call 并返回 tool_response 或 error 事件，不抛异常"""
        ...


class TaskBackend(Protocol):
    """任务后端协作方 -- 每个后端 intent 一个方法

    返回值原样作为 tool_response 事件的 data。
    """

    async def get_tasks(self, tool_call: GetTasksTool) -> Any: ...

    async def create_task(self, tool_call: CreateTaskTool) -> Any: ...

    async def create_project(self, tool_call: CreateProjectTool) -> Any: ...

    async def delete_task(self, tool_call: DeleteTaskTool) -> Any: ...

    async def update_task(self, tool_call: UpdateTaskTool) -> Any: ...

    async def get_task_details(self, tool_call: GetTaskDetailsTool) -> Any: ...


def _error_code(error: Exception) -> str:
    """优先使用异常自带的 code 属性，否则取异常类名"""
    code = getattr(error, "code", None)
    if isinstance(code, str) and code:
        return code
    return type(error).__name__


class NotionToolExecutor:
    """面向 Notion 任务后端的 ToolExecutor 实现

    - 控制类 intent（done_for_now / request_more_information）：
      原样回显 parameters，不调用后端
    - 后端类 intent：一一路由到 TaskBackend 对应方法
    """

    def __init__(self, backend: TaskBackend) -> None:
        self._backend = backend

    async def execute(self, tool_call: ToolCall) -> ToolExecutionResult:
        intent = getattr(tool_call, "intent", None)
        try:
            if intent in CONTROL_INTENTS:
                return self._success(tool_call.parameters.model_dump(mode="json"))

            result = await self._execute_backend_tool(tool_call)
            log.info("tool_executed", intent=intent)
            return self._success(result)
        except Exception as e:
            return self._failure(e, intent)

    async def _execute_backend_tool(self, tool_call: ToolCall) -> Any:
        """按 intent 分发到后端方法；未匹配的 intent 是致命错误"""
        match tool_call:
            case GetTasksTool():
                return await self._backend.get_tasks(tool_call)
            case CreateTaskTool():
                return await self._backend.create_task(tool_call)
            case CreateProjectTool():
                return await self._backend.create_project(tool_call)
            case DeleteTaskTool():
                return await self._backend.delete_task(tool_call)
            case UpdateTaskTool():
                return await self._backend.update_task(tool_call)
            case GetTaskDetailsTool():
                return await self._backend.get_task_details(tool_call)
            case _:
                raise UnknownToolIntentError(getattr(tool_call, "intent", tool_call))

    @staticmethod
    def _success(data: Any) -> ToolExecutionResult:
        return ToolExecutionResult(event=ToolResponseEvent(data=data))

    @staticmethod
    def _failure(error: Exception, intent: str | None) -> ToolExecutionResult:
        code = _error_code(error)
        if isinstance(error, UnknownToolIntentError):
            log.error("unknown_tool_intent", intent=intent)
        else:
            log.warning(
                "tool_execution_failed",
                intent=intent,
                error=str(error),
                error_type=type(error).__name__,
            )
        return ToolExecutionResult(
            event=ErrorEvent(
                data=ErrorData(
                    error=f"Failed to execute tool '{intent}': {error}",
                    code=code,
                )
            )
        )
