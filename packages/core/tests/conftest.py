"""packages/core 测试配置 -- 核心层 fixture"""

from unittest.mock import AsyncMock

import pytest
from taskagent.core.models import (
    CreateTaskParameters,
    CreateTaskTool,
    DeleteTaskParameters,
    DeleteTaskTool,
    DoneForNowTool,
    MessageParameters,
    RequestMoreInformationTool,
)
from taskagent.core.store import InMemoryStateStore
from taskagent.core.thread import Thread


@pytest.fixture
def store() -> InMemoryStateStore[Thread]:
    """以空 Thread 初始化的内存 store"""
    return InMemoryStateStore(Thread())


@pytest.fixture
def backend() -> AsyncMock:
    """任务后端 Mock，每个方法返回固定结果"""
    mock = AsyncMock()
    mock.get_tasks.return_value = [{"id": "task-1", "title": "Buy milk"}]
    mock.create_task.return_value = {"task_id": "task-2"}
    mock.create_project.return_value = {"project_id": "project-1"}
    mock.delete_task.return_value = {"deleted": True}
    mock.update_task.return_value = {"task_id": "task-1", "updated": True}
    mock.get_task_details.return_value = {"id": "task-1", "title": "Buy milk"}
    return mock


@pytest.fixture
def create_task_call() -> CreateTaskTool:
    return CreateTaskTool(parameters=CreateTaskParameters(title="Buy milk"))


@pytest.fixture
def delete_task_call() -> DeleteTaskTool:
    return DeleteTaskTool(parameters=DeleteTaskParameters(task_id="task-1"))


@pytest.fixture
def done_call() -> DoneForNowTool:
    return DoneForNowTool(parameters=MessageParameters(message="All set"))


@pytest.fixture
def clarify_call() -> RequestMoreInformationTool:
    return RequestMoreInformationTool(
        parameters=MessageParameters(message="Which project should it go in?")
    )
