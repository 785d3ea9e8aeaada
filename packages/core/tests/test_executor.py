"""NotionToolExecutor 单元测试

测试内容：
1. 后端 intent 一一路由
2. 控制类 intent 回显 parameters
3. 故障转换为 error 事件（不抛异常）
"""

import pytest
from taskagent.core.agent.executor import NotionToolExecutor
from taskagent.core.models import (
    CreateProjectParameters,
    CreateProjectTool,
    ErrorEvent,
    GetTaskDetailsParameters,
    GetTaskDetailsTool,
    GetTasksTool,
    ToolResponseEvent,
    UpdateTaskParameters,
    UpdateTaskTool,
)


class BackendError(Exception):
    """带 code 属性的后端异常"""

    code = "object_not_found"


class TestBackendRouting:
    """后端 intent 路由测试"""

    async def test_create_task(self, backend, create_task_call):
        """create_task 调用后端并原样返回结果"""
        result = await NotionToolExecutor(backend).execute(create_task_call)

        backend.create_task.assert_awaited_once_with(create_task_call)
        assert isinstance(result.event, ToolResponseEvent)
        assert result.event.data == {"task_id": "task-2"}

    @pytest.mark.parametrize(
        ("tool_call", "method"),
        [
            (GetTasksTool(), "get_tasks"),
            (
                CreateProjectTool(
                    parameters=CreateProjectParameters(
                        name="Home", description="Chores", importance="⭐"
                    )
                ),
                "create_project",
            ),
            (UpdateTaskTool(parameters=UpdateTaskParameters(task_id="task-1")), "update_task"),
            (
                GetTaskDetailsTool(parameters=GetTaskDetailsParameters(task_id="task-1")),
                "get_task_details",
            ),
        ],
    )
    async def test_each_intent_routes_to_one_method(self, backend, tool_call, method):
        """每个后端 intent 只调用对应的一个后端方法"""
        await NotionToolExecutor(backend).execute(tool_call)

        getattr(backend, method).assert_awaited_once_with(tool_call)
        for other in ("get_tasks", "create_task", "create_project", "update_task", "get_task_details"):
            if other != method:
                getattr(backend, other).assert_not_awaited()

    async def test_delete_task_executes_when_called(self, backend, delete_task_call):
        """executor 本身不做审批判断"""
        result = await NotionToolExecutor(backend).execute(delete_task_call)

        backend.delete_task.assert_awaited_once_with(delete_task_call)
        assert result.event.data == {"deleted": True}


class TestControlIntents:
    """控制类 intent 测试"""

    async def test_done_for_now_echoes_parameters(self, backend, done_call):
        """done_for_now 回显 parameters，不调用后端"""
        result = await NotionToolExecutor(backend).execute(done_call)

        assert isinstance(result.event, ToolResponseEvent)
        assert result.event.data == {"message": "All set"}
        assert backend.method_calls == []

    async def test_request_more_information_echoes_parameters(self, backend, clarify_call):
        """request_more_information 回显 parameters"""
        result = await NotionToolExecutor(backend).execute(clarify_call)

        assert result.event.data == {"message": "Which project should it go in?"}
        assert backend.method_calls == []


class TestFailures:
    """故障转换测试"""

    async def test_backend_exception_becomes_error_event(self, backend, create_task_call):
        """后端异常转换为 error 事件，code 取异常类名"""
        backend.create_task.side_effect = RuntimeError("Network error")

        result = await NotionToolExecutor(backend).execute(create_task_call)

        assert isinstance(result.event, ErrorEvent)
        assert result.event.data.error == "Failed to execute tool 'create_task': Network error"
        assert result.event.data.code == "RuntimeError"

    async def test_error_code_attribute_preferred(self, backend, create_task_call):
        """异常自带 code 属性时使用该值"""
        backend.create_task.side_effect = BackendError("Could not find page")

        result = await NotionToolExecutor(backend).execute(create_task_call)

        assert result.event.data.code == "object_not_found"

    async def test_unknown_intent_becomes_error_event(self, backend):
        """封闭集合外的 tool call 转换为 error 事件"""

        class Rogue:
            intent = "archive_everything"

        result = await NotionToolExecutor(backend).execute(Rogue())  # type: ignore[arg-type]

        assert isinstance(result.event, ErrorEvent)
        assert result.event.data.code == "UnknownToolIntentError"
        assert "archive_everything" in result.event.data.error
        assert backend.method_calls == []
