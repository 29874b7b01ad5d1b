"""
Accumulation of a conversation and its rendering into a prompt.

The builder collects the turns of a conversation in order, together
with the tool declarations and the template variant. Nothing is
validated against the model until `build()` is called: only then are
the templates of the model looked up. Declaring tools twice is the one
misuse reported immediately.

Example:
    ```python
    prompt = (
        support.builder()
        .add_system_message("be terse")
        .add_user_message("hello")
        .build()
    )
    ```
"""

from collections.abc import Iterable
from enum import StrEnum
from typing import Any

from .exceptions import InvalidStateError, UnsupportedTemplateError
from .messages import (
    ContentMessage,
    Message,
    PromptRole,
    ToolCallMessage,
    ToolResult,
)
from .provider import TemplateProvider
from .renderer import RenderOutcome, TemplateRenderer
from .tools import ToolCall


class PromptVariant(StrEnum):
    """The template variants a model may ship."""

    DEFAULT = 'default'
    TOOL = 'tool'
    RAG = 'rag'


class PromptBuilder:
    """Builds the prompt of one conversation.

    Builders are obtained from `PromptSupport.builder()`. A builder is
    meant to be used by a single caller; it is not thread-safe.
    """

    def __init__(
        self,
        provider: TemplateProvider,
        renderer: TemplateRenderer,
        *,
        variant: PromptVariant | str = PromptVariant.DEFAULT,
        add_generation_prompt: bool = True,
    ) -> None:
        self._provider = provider
        self._renderer = renderer
        self._variant = PromptVariant(variant)
        self._add_generation_prompt = add_generation_prompt
        self._messages: list[Message] = []
        self._tools: list[Any] | None = None

    @property
    def variant(self) -> PromptVariant:
        return self._variant

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def set_variant(self, variant: PromptVariant | str) -> 'PromptBuilder':
        """Select the template variant. Raises ValueError for names
        that are not a PromptVariant."""
        self._variant = PromptVariant(variant)
        return self

    def set_add_generation_prompt(self, value: bool) -> 'PromptBuilder':
        self._add_generation_prompt = value
        return self

    def add_system_message(self, content: Any) -> 'PromptBuilder':
        return self._add_content(PromptRole.SYSTEM, content)

    def add_user_message(self, content: Any) -> 'PromptBuilder':
        return self._add_content(PromptRole.USER, content)

    def add_assistant_message(self, content: Any) -> 'PromptBuilder':
        return self._add_content(PromptRole.ASSISTANT, content)

    def add_tool_result(self, result: ToolResult | Any) -> 'PromptBuilder':
        """Add the outcome of a tool call. A ToolResult is added as its
        JSON text; any other value is added unchanged."""
        if isinstance(result, ToolResult):
            result = result.to_json()
        return self._add_content(PromptRole.TOOL, result)

    def add_tool_call(self, call: ToolCall) -> 'PromptBuilder':
        self._messages.append(ToolCallMessage(tool_call=call))
        return self

    def _add_content(self, role: PromptRole, content: Any) -> 'PromptBuilder':
        self._messages.append(ContentMessage(role=role, content=content))
        return self

    def add_tools(self, tools: Iterable[Any]) -> 'PromptBuilder':
        """Declare the tools available to the model. The declarations
        are passed to the template unchanged.

        Raises:
            InvalidStateError: if the tools were already declared.
        """
        if self._tools is not None:
            raise InvalidStateError("Tools already set")
        self._tools = list(tools)
        return self

    def has_tools(self) -> bool:
        return bool(self._tools)

    def get_tools(self) -> list[Any]:
        return list(self._tools or [])

    def render_context(self) -> dict[str, Any]:
        """The variables handed to the template."""
        context: dict[str, Any] = {
            'messages': [message.to_map() for message in self._messages],
            'add_generation_prompt': self._add_generation_prompt,
            'eos_token': self._provider.eos_token,
            # the beginning-of-sequence token is added at tokenization
            'bos_token': "",
        }
        if self.has_tools():
            context['tools'] = self.get_tools()
        return context

    def _template(self) -> str:
        templates = self._provider.prompt_templates
        if not templates:
            raise UnsupportedTemplateError(
                "Prompt templates are not available for this model"
            )
        template = templates.get(self._variant.value)
        if template is None:
            raise UnsupportedTemplateError(
                f"Prompt template not available for type: {self._variant.value}"
            )
        return template

    def render(self) -> RenderOutcome:
        """Render the conversation, returning the output together with
        the errors reported by the template engine.

        Raises:
            UnsupportedTemplateError: if the model has no template for
                the selected variant.
        """
        if not self._messages:
            return RenderOutcome()
        return self._renderer.render(self._template(), self.render_context())

    def build(self) -> str:
        """Render the conversation into a prompt. An empty conversation
        gives an empty prompt.

        Raises:
            UnsupportedTemplateError: if the model has no template for
                the selected variant.
        """
        return self.render().output
