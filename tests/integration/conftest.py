"""集成测试共享 fixture -- 内存后端 + 完整 agent 组装"""

from typing import Any

import pytest
from taskagent.core import (
    AgentLoop,
    AgentOrchestrator,
    InMemoryStateStore,
    LLMAgentReducer,
    NotionToolExecutor,
    Thread,
    build_explanation_prompt,
    build_system_prompt,
)
from taskagent.core.models import build_tool_schemas


class InMemoryTaskBackend:
    """TaskBackend 的内存实现，记录每次调用"""

    def __init__(self) -> None:
        self.tasks: dict[str, dict[str, Any]] = {}
        self.calls: list[str] = []

    async def get_tasks(self, tool_call) -> Any:
        self.calls.append("get_tasks")
        return list(self.tasks.values())

    async def create_task(self, tool_call) -> Any:
        self.calls.append("create_task")
        task_id = f"task-{len(self.tasks) + 1}"
        self.tasks[task_id] = {"id": task_id, "title": tool_call.parameters.title}
        return {"task_id": task_id}

    async def create_project(self, tool_call) -> Any:
        self.calls.append("create_project")
        return {"project_id": "project-1"}

    async def delete_task(self, tool_call) -> Any:
        self.calls.append("delete_task")
        task_id = tool_call.parameters.task_id
        if task_id not in self.tasks:
            raise KeyError(task_id)
        del self.tasks[task_id]
        return {"deleted": task_id}

    async def update_task(self, tool_call) -> Any:
        self.calls.append("update_task")
        return {"task_id": tool_call.parameters.task_id}

    async def get_task_details(self, tool_call) -> Any:
        self.calls.append("get_task_details")
        return self.tasks[tool_call.parameters.task_id]


@pytest.fixture
def task_backend() -> InMemoryTaskBackend:
    return InMemoryTaskBackend()


@pytest.fixture
def build_agent(task_backend):
    """按给定 LLM client 组装完整 agent，返回 (loop, store)"""

    def _build(llm_client, **loop_kwargs) -> tuple[AgentLoop, InMemoryStateStore[Thread]]:
        store = InMemoryStateStore(Thread())
        reducer = LLMAgentReducer(
            llm_client,
            build_tool_schemas(),
            build_system_prompt,
            build_explanation_prompt,
        )
        orchestrator = AgentOrchestrator(reducer, NotionToolExecutor(task_backend), store)
        return AgentLoop(orchestrator, reducer, **loop_kwargs), store

    return _build
