"""
Tool calls and tool declarations.

A tool call is the request of the model to invoke a named function
with arguments. Chat templates read tool calls through nested
attributes, as in

    ```jinja
    {% for call in message.tool_calls %}
    {{ call.function.name }}({{ call.function.arguments | tojson }})
    {% endfor %}
    ```

The classes `ToolCallFunction` and `FunctionView` reproduce this
access pattern on top of a `ToolCall`, without holding any state of
their own.

Tool declarations (the schemas of the functions the model may call)
are passed to the templates unchanged. The `Tool` model is provided
for convenience; declarations of any other shape (such as plain
dictionaries in the OpenAI format) are accepted as well.
"""

from typing import Any, Literal
from pydantic import BaseModel, ConfigDict, Field


class ToolCall(BaseModel):
    """A function invocation requested by the model."""

    name: str = Field(min_length=1)
    parameters: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra='forbid')


class FunctionView:
    """The `function` attribute of a tool call, as seen by templates."""

    __slots__ = ('_call',)

    def __init__(self, call: ToolCall) -> None:
        self._call = call

    @property
    def name(self) -> str:
        return self._call.name

    @property
    def arguments(self) -> dict[str, Any]:
        return dict(self._call.parameters)

    def __repr__(self) -> str:
        return f"FunctionView(name={self.name!r})"


class ToolCallFunction:
    """An element of the `tool_calls` sequence of a message."""

    __slots__ = ('_call',)

    def __init__(self, call: ToolCall) -> None:
        self._call = call

    @property
    def function(self) -> FunctionView:
        return FunctionView(self._call)

    def to_map(self) -> dict[str, Any]:
        return {
            'function': {
                'name': self._call.name,
                'arguments': dict(self._call.parameters),
            }
        }

    def __repr__(self) -> str:
        return f"ToolCallFunction({self._call!r})"


class FunctionDefinition(BaseModel):
    """The schema of a callable function.

    Attributes:
        name: the function name
        description: what the function does, read by the model
        parameters: JSON schema of the arguments
    """

    name: str = Field(min_length=1)
    description: str | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra='allow')


class Tool(BaseModel):
    """A tool declaration in the format expected by chat templates."""

    type: Literal['function'] = 'function'
    function: FunctionDefinition

    model_config = ConfigDict(frozen=True, extra='allow')

    @classmethod
    def from_function(
        cls,
        name: str,
        description: str | None = None,
        parameters: dict[str, Any] | None = None,
    ) -> 'Tool':
        return cls(
            function=FunctionDefinition(
                name=name,
                description=description,
                parameters=parameters or {},
            )
        )
