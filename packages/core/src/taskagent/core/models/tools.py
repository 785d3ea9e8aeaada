"""ToolCall 数据模型 -- 以 intent 为判别字段的封闭联合类型

每个 intent 固定一种 parameters 结构。
LLM 输出通过 parse_tool_call() 校验后才能进入 Thread。
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .enums import ToolIntent

TaskType = Literal["Today", "Next Actions", "Someday / Maybe", "Wait for", "Routin"]

Importance = Literal["⭐", "⭐⭐", "⭐⭐⭐", "⭐⭐⭐⭐", "⭐⭐⭐⭐⭐"]


class _ToolModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# ============================================================
# Parameters
# ============================================================


class CreateTaskParameters(_ToolModel):
    """create_task 参数"""

    title: str = Field(description="Task title")
    description: str | None = Field(default=None, description="Task description")
    task_type: TaskType | None = Field(default=None, description="Type of task in GTD system")
    scheduled_date: str | None = Field(default=None, description="Scheduled date in ISO format")
    project_id: str | None = Field(default=None, description="Related project ID")


class CreateProjectParameters(_ToolModel):
    """create_project 参数"""

    name: str = Field(description="Project name")
    description: str = Field(description="Project description")
    importance: Importance = Field(description="Project importance level")
    action_plan: str | None = Field(default=None, description="Action plan")


class GetTasksParameters(_ToolModel):
    """get_tasks 参数（全部可选）"""

    task_type: TaskType | None = Field(default=None, description="Filter by task type")
    project_id: str | None = Field(default=None, description="Filter by project ID")
    search_title: str | None = Field(
        default=None,
        description="Search tasks by title/name (partial match)",
    )
    limit: int | None = Field(
        default=None,
        ge=1,
        le=100,
        description="Maximum number of tasks to return (default: 10)",
    )
    include_completed: bool | None = Field(
        default=None,
        description="Whether to include completed tasks (default: false)",
    )
    sort_by: Literal["created_at", "updated_at", "scheduled_date"] | None = Field(
        default=None,
        description="Field to sort by (default: created_at)",
    )
    sort_order: Literal["asc", "desc"] | None = Field(
        default=None,
        description="Sort order (default: desc)",
    )


class DeleteTaskParameters(_ToolModel):
    """delete_task 参数"""

    task_id: str = Field(description="ID of the task to delete")
    reason: str | None = Field(default=None, description="Reason for deletion (optional)")


class UpdateTaskParameters(_ToolModel):
    """update_task 参数

    scheduled_date / project_id 显式传 None 表示清除该字段。
    """

    task_id: str = Field(description="ID of the task to update")
    title: str | None = Field(default=None, description="New task title")
    task_type: TaskType | None = Field(default=None, description="New type of task in GTD system")
    scheduled_date: str | None = Field(
        default=None,
        description="New scheduled date in ISO format (null to remove)",
    )
    project_id: str | None = Field(default=None, description="New project ID (null to remove)")
    is_archived: bool | None = Field(default=None, description="Archive or restore the task")


class GetTaskDetailsParameters(_ToolModel):
    """get_task_details 参数"""

    task_id: str = Field(description="ID of the task to retrieve")


class MessageParameters(_ToolModel):
    """控制类 intent 参数：发给用户的消息"""

    message: str = Field(description="Message for the user")


# ============================================================
# ToolCall variants
# ============================================================


class CreateTaskTool(_ToolModel):
    intent: Literal["create_task"] = "create_task"
    parameters: CreateTaskParameters


class CreateProjectTool(_ToolModel):
    intent: Literal["create_project"] = "create_project"
    parameters: CreateProjectParameters


class GetTasksTool(_ToolModel):
    intent: Literal["get_tasks"] = "get_tasks"
    parameters: GetTasksParameters = Field(default_factory=GetTasksParameters)


class DeleteTaskTool(_ToolModel):
    intent: Literal["delete_task"] = "delete_task"
    parameters: DeleteTaskParameters


class UpdateTaskTool(_ToolModel):
    intent: Literal["update_task"] = "update_task"
    parameters: UpdateTaskParameters


class GetTaskDetailsTool(_ToolModel):
    intent: Literal["get_task_details"] = "get_task_details"
    parameters: GetTaskDetailsParameters


class RequestMoreInformationTool(_ToolModel):
    intent: Literal["request_more_information"] = "request_more_information"
    parameters: MessageParameters


class DoneForNowTool(_ToolModel):
    intent: Literal["done_for_now"] = "done_for_now"
    parameters: MessageParameters


ToolCall = Annotated[
    CreateTaskTool
    | CreateProjectTool
    | GetTasksTool
    | DeleteTaskTool
    | UpdateTaskTool
    | GetTaskDetailsTool
    | RequestMoreInformationTool
    | DoneForNowTool,
    Field(discriminator="intent"),
]

_TOOL_CALL_ADAPTER: TypeAdapter[ToolCall] = TypeAdapter(ToolCall)

# intent -> (ToolCall 类型, LLM 工具描述)
TOOL_REGISTRY: dict[ToolIntent, tuple[type[BaseModel], str]] = {
    ToolIntent.CREATE_TASK: (CreateTaskTool, "Create a new task in the GTD system"),
    ToolIntent.CREATE_PROJECT: (CreateProjectTool, "Create a new project"),
    ToolIntent.GET_TASKS: (
        GetTasksTool,
        "Retrieve tasks with optional filtering and sorting",
    ),
    ToolIntent.DELETE_TASK: (DeleteTaskTool, "Delete a task from the GTD system"),
    ToolIntent.UPDATE_TASK: (UpdateTaskTool, "Update an existing task in the GTD system"),
    ToolIntent.GET_TASK_DETAILS: (
        GetTaskDetailsTool,
        "Get detailed information about a specific task",
    ),
    ToolIntent.REQUEST_MORE_INFORMATION: (
        RequestMoreInformationTool,
        "Request more information from the user",
    ),
    ToolIntent.DONE_FOR_NOW: (
        DoneForNowTool,
        "Complete the conversation with a natural response to the user",
    ),
}


def parse_tool_call(raw: Any) -> ToolCall:
    """校验原始数据并构造 ToolCall

    Args:
        raw: {"intent": ..., "parameters": {...}} 结构的 dict（或已构造的 ToolCall）

    Returns:
        对应 intent 的 ToolCall 实例

    Raises:
        pydantic.ValidationError: intent 未知或 parameters 不合法
    """
    return _TOOL_CALL_ADAPTER.validate_python(raw)


def build_tool_schemas() -> list[dict[str, Any]]:
    """从 parameters 模型生成 function tool 定义（OpenAI/LiteLLM 格式）

    工具集合与 ToolIntent 一一对应，按枚举定义顺序输出。
    """
    schemas: list[dict[str, Any]] = []
    for intent in ToolIntent:
        tool_cls, description = TOOL_REGISTRY[intent]
        params_cls = tool_cls.model_fields["parameters"].annotation
        schemas.append(
            {
                "type": "function",
                "function": {
                    "name": intent.value,
                    "description": description,
                    "parameters": params_cls.model_json_schema(),
                },
            }
        )
    return schemas
