"""Event Domain Model -- 会话日志条目

所有事件统一为 {type, timestamp, data} 结构，以 type 判别。
事件实例不可变（frozen）；timestamp 仅作参考元数据，
会话顺序以追加顺序为准。
"""

from datetime import UTC, datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .enums import EventType
from .tools import ToolCall


def _now() -> datetime:
    return datetime.now(UTC)


class _EventBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=_now, description="事件时间戳（参考值）")


class ErrorData(BaseModel):
    """error 事件 data"""

    model_config = ConfigDict(frozen=True)

    error: str = Field(description="可读错误信息")
    code: str | None = Field(default=None, description="机器可读错误码（尽力提供）")


class CompleteData(BaseModel):
    """complete 事件 data"""

    model_config = ConfigDict(frozen=True)

    message: str


class TextChunkData(BaseModel):
    """text_chunk 事件 data"""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="文本片段（一个或多个 token）")
    message_id: str = Field(description="同一条消息的片段共享此 ID")


class ConnectedData(BaseModel):
    """connected 事件 data"""

    model_config = ConfigDict(frozen=True)

    status: Literal["ready"] = "ready"
    conversation_id: str


class UserInputEvent(_EventBase):
    """用户输入"""

    type: Literal[EventType.USER_INPUT] = EventType.USER_INPUT
    data: str


class ToolCallEvent(_EventBase):
    """LLM 选择的结构化动作"""

    type: Literal[EventType.TOOL_CALL] = EventType.TOOL_CALL
    data: ToolCall


class ToolResponseEvent(_EventBase):
    """工具执行结果，data 原样保存后端返回值"""

    type: Literal[EventType.TOOL_RESPONSE] = EventType.TOOL_RESPONSE
    data: Any


class ErrorEvent(_EventBase):
    """处理过程中的错误"""

    type: Literal[EventType.ERROR] = EventType.ERROR
    data: ErrorData


class AwaitingApprovalEvent(_EventBase):
    """等待人工审批"""

    type: Literal[EventType.AWAITING_APPROVAL] = EventType.AWAITING_APPROVAL
    data: ToolCall


class CompleteEvent(_EventBase):
    """agent 处理结束"""

    type: Literal[EventType.COMPLETE] = EventType.COMPLETE
    data: CompleteData


class TextChunkEvent(_EventBase):
    """流式文本片段（扩展事件）"""

    type: Literal[EventType.TEXT_CHUNK] = EventType.TEXT_CHUNK
    data: TextChunkData


class ConnectedEvent(_EventBase):
    """连接就绪（扩展事件）"""

    type: Literal[EventType.CONNECTED] = EventType.CONNECTED
    data: ConnectedData


Event = Annotated[
    UserInputEvent
    | ToolCallEvent
    | ToolResponseEvent
    | ErrorEvent
    | AwaitingApprovalEvent
    | CompleteEvent
    | TextChunkEvent
    | ConnectedEvent,
    Field(discriminator="type"),
]

_EVENT_ADAPTER: TypeAdapter[Event] = TypeAdapter(Event)


def parse_event(raw: Any) -> Event:
    """校验原始 dict 并构造对应类型的 Event

    Raises:
        pydantic.ValidationError: type 未知或 data 不合法
    """
    return _EVENT_ADAPTER.validate_python(raw)
