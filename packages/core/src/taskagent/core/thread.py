"""Thread -- 不可变的会话事件日志

构造时复制种子序列，之后不再变化；每次状态迁移都产生新的 Thread。
serialize_for_llm() 输出的伪标签格式是 prompt 兼容性的一部分：

    <tag>
    key: value
    </tag>

tag 对 tool_call 事件取 intent，其余事件取 type。
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel

from .exceptions import EventSerializationError
from .gating import needs_human_approval, needs_human_response
from .models.event import Event, ToolCallEvent

_LEADING_WHITESPACE = re.compile(r"^[ \t]+", re.MULTILINE)

# tool call 的 intent 已作为 tag 名输出，不再重复出现在正文
_TAG_KEY = "intent"


def _stringify(value: Any) -> str:
    """原始值转字符串：bool/None 使用 true/false/null 字面量"""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_plain(value: Any) -> Any:
    """pydantic 模型转为 dict，只保留显式设置过的字段"""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_unset=True)
    return value


def _tool_call_as_plain(tool_call: BaseModel) -> dict[str, Any]:
    """tool call 转为 dict；parameters 即使取默认值也输出，渲染结果与构造方式无关"""
    data = tool_call.model_dump(mode="json", exclude_unset=True)
    data.setdefault("parameters", _as_plain(tool_call.parameters))
    return data


class Thread:
    """会话事件日志 -- 只能通过 reducer 推进"""

    __slots__ = ("_events",)

    def __init__(self, events: Iterable[Event] = ()) -> None:
        self._events: tuple[Event, ...] = tuple(events)

    @property
    def events(self) -> tuple[Event, ...]:
        """按追加顺序排列的事件序列（只读）"""
        return self._events

    @property
    def last_event(self) -> Event | None:
        return self._events[-1] if self._events else None

    def __len__(self) -> int:
        return len(self._events)

    def __repr__(self) -> str:
        return f"Thread(events={len(self._events)})"

    # ============================================================
    # LLM 序列化
    # ============================================================

    def serialize_for_llm(self) -> str:
        """序列化全部事件，事件之间以单个换行连接；空 Thread 返回空串

        Raises:
            EventSerializationError: 某个事件的 data 为 None
        """
        return "\n".join(self.serialize_one_event(e) for e in self._events)

    def serialize_one_event(self, event: Event) -> str:
        """将单个事件渲染为伪标签块"""
        if event.data is None:
            raise EventSerializationError(event.type)
        tag = event.data.intent if isinstance(event, ToolCallEvent) else event.type
        data = _tool_call_as_plain(event.data) if isinstance(event, ToolCallEvent) else event.data
        content = self._serialize_event_data(data)
        return self.trim_leading_whitespace(f"\n<{tag}>\n{content}\n</{tag}>\n")

    @staticmethod
    def trim_leading_whitespace(text: str) -> str:
        """去掉每行开头的空格和制表符，行尾与行内空白保留"""
        return _LEADING_WHITESPACE.sub("", text)

    def _serialize_event_data(self, data: Any) -> str:
        data = _as_plain(data)

        if isinstance(data, str):
            return data

        if isinstance(data, Mapping):
            return "\n".join(
                f"{key}: {self._serialize_value(val)}"
                for key, val in data.items()
                if key != _TAG_KEY
            )

        if isinstance(data, list | tuple):
            return "\n".join(
                f"{index}: {self._serialize_value(val)}" for index, val in enumerate(data)
            )

        return _stringify(data)

    def _serialize_value(self, value: Any) -> str:
        """嵌套值渲染为单行：{k: v, ...} / [v, ...]"""
        value = _as_plain(value)

        if isinstance(value, Mapping):
            entries = ", ".join(
                f"{key}: {self._serialize_value(val)}" for key, val in value.items()
            )
            return f"{{{entries}}}"

        if isinstance(value, list | tuple):
            return f"[{', '.join(self._serialize_value(item) for item in value)}]"

        return _stringify(value)

    # ============================================================
    # 尾事件判定
    # ============================================================

    def awaiting_human_response(self) -> bool:
        """最后一个事件是 request_more_information / done_for_now 的 tool call"""
        last = self.last_event
        return isinstance(last, ToolCallEvent) and needs_human_response(last.data)

    def awaiting_human_approval(self) -> bool:
        """最后一个事件是 delete_task 的 tool call"""
        last = self.last_event
        return isinstance(last, ToolCallEvent) and needs_human_approval(last.data)
