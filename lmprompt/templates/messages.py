"""
Conversation turns and their serialization into template records.

A message is one of two kinds:

    - a `ContentMessage`, carrying the content of a system, user,
      assistant or tool turn. The content is usually a string, but tool
      results may carry any JSON-like value.
    - a `ToolCallMessage`, carrying exactly one `ToolCall` and no
      content.

The record produced by `to_map()` contains only the keys that are
valid for the message kind: a content message has no `tool_calls` key
and a tool call message has no `content` key. Keys are left out rather
than set to None, because chat templates test for `content is defined`
or `message.tool_calls` and a None value would not behave as an absent
key in these tests. For the same reason a content message cannot be
created with None content.

Example:
    ```python
    msg = ContentMessage(role=PromptRole.USER, content="hi")
    msg.to_map()  # {'role': 'user', 'content': 'hi'}

    call = ToolCallMessage(
        tool_call=ToolCall(name="lookup", parameters={"q": "x"})
    )
    call.to_map()
    # {'role': 'tool_call', 'tool_calls': [
    #     {'function': {'name': 'lookup', 'arguments': {'q': 'x'}}}]}
    ```
"""

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator

from .tools import ToolCall, ToolCallFunction


class PromptRole(StrEnum):
    """The role of a conversation turn."""

    SYSTEM = 'system'
    USER = 'user'
    ASSISTANT = 'assistant'
    TOOL = 'tool'
    TOOL_CALL = 'tool_call'


class ContentMessage(BaseModel):
    """A turn carrying content: system, user, assistant or tool."""

    role: PromptRole
    content: Any

    model_config = ConfigDict(frozen=True, extra='forbid')

    @field_validator('role', mode='after')
    @classmethod
    def validate_role(cls, role: PromptRole) -> PromptRole:
        if role == PromptRole.TOOL_CALL:
            raise ValueError(
                "Tool call messages carry a ToolCall, not content"
            )
        return role

    @field_validator('content', mode='after')
    @classmethod
    def validate_content(cls, content: Any) -> Any:
        if content is None:
            raise ValueError("A message must carry content")
        return content

    @property
    def tool_calls(self) -> tuple[ToolCallFunction, ...]:
        return ()

    def to_map(self) -> dict[str, Any]:
        return {'role': self.role.value, 'content': self.content}


class ToolCallMessage(BaseModel):
    """A turn in which the model requests a tool invocation."""

    role: Literal[PromptRole.TOOL_CALL] = PromptRole.TOOL_CALL
    tool_call: ToolCall

    model_config = ConfigDict(frozen=True, extra='forbid')

    @property
    def tool_calls(self) -> tuple[ToolCallFunction, ...]:
        return (ToolCallFunction(self.tool_call),)

    def to_map(self) -> dict[str, Any]:
        return {
            'role': PromptRole.TOOL_CALL.value,
            'tool_calls': [call.to_map() for call in self.tool_calls],
        }


Message = ContentMessage | ToolCallMessage


class ToolResult(BaseModel):
    """The outcome of executing a tool call, fed back to the model.

    Attributes:
        tool_name: the name of the tool that was called
        result: the value returned by the tool (any JSON-like value)
        call_id: optional identifier of the originating call
    """

    tool_name: str
    result: Any
    call_id: str | None = None

    model_config = ConfigDict(frozen=True, extra='forbid')

    def to_json(self) -> str:
        """The JSON text used as content of the tool message."""
        return self.model_dump_json(exclude_none=True)
