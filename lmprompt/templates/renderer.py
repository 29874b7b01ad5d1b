"""
Rendering of chat templates with Jinja2.

The renderer configures the template engine the way chat templates
are written for Hugging Face models: block tags are trimmed and
left-stripped, the `tojson` filter does not escape HTML, and
`break`/`continue` are available in loops. Templates are rendered in
an immutable sandbox, since they come with the model and are not
trusted.

Attribute lookups fall back from snake_case to camelCase names, so a
template may write `message.tool_calls` for an object exposing
`toolCalls`.

The renderer never raises. Errors reported by the engine, and any
exception raised while a template is evaluated, are collected in the
returned `RenderOutcome` and logged as warnings; the output produced up
to the failure is returned. Messages passed to the raise signal are
also added to the errors of the render in which they were raised.

Example:
    ```python
    renderer = TemplateRenderer()
    outcome = renderer.render(
        "{% for m in messages %}{{ m.role }}: {{ m.content }}\\n{% endfor %}",
        {'messages': [{'role': 'user', 'content': "hello"}]},
    )
    outcome.output  # 'user: hello\\n'
    ```
"""

import json
from collections.abc import Callable, Mapping
from contextvars import ContextVar
from functools import lru_cache
from typing import Any

from jinja2 import TemplateError, Undefined
from jinja2.sandbox import ImmutableSandboxedEnvironment
from pydantic import BaseModel, ConfigDict, Field

from lmprompt.config.config import RenderSettings, Settings
from .diagnostics import TemplateDiagnostics
from .tools import FunctionView, ToolCallFunction

# messages of the raise signal collected by the render in progress
_raised_messages: ContextVar[list[str] | None] = ContextVar(
    '_raised_messages', default=None
)


class RenderOutcome(BaseModel):
    """The rendered text and the errors reported by the engine."""

    output: str = ""
    errors: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


def _camel_case(name: str) -> str:
    head, *tail = name.split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in tail)


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode='json', exclude_none=True)
    if isinstance(value, ToolCallFunction):
        return value.to_map()
    if isinstance(value, FunctionView):
        return {'name': value.name, 'arguments': value.arguments}
    raise TypeError(
        f"Object of type {type(value).__name__} is not JSON serializable"
    )


def tojson(
    value: Any,
    indent: int | None = None,
    separators: tuple[str, str] | None = None,
    sort_keys: bool = False,
    ensure_ascii: bool = False,
) -> str:
    """The `tojson` filter of chat templates. Unlike the builtin Jinja2
    filter, the output is not HTML-escaped."""
    return json.dumps(
        value,
        indent=indent,
        separators=separators,
        sort_keys=sort_keys,
        ensure_ascii=ensure_ascii,
        default=_json_default,
    )


class PromptEnvironment(ImmutableSandboxedEnvironment):
    """Sandboxed environment resolving snake_case attribute names to
    their camelCase counterparts when the former are not found."""

    def __init__(
        self, *, snake_case_properties: bool = True, **options: Any
    ) -> None:
        super().__init__(**options)
        self.snake_case_properties = snake_case_properties

    def getattr(self, obj: Any, attribute: str) -> Any:
        value = super().getattr(obj, attribute)
        if (
            self.snake_case_properties
            and isinstance(value, Undefined)
            and '_' in attribute
            and not attribute.startswith('_')
        ):
            alias = _camel_case(attribute)
            if alias != attribute:
                return super().getattr(obj, alias)
        return value


class TemplateRenderer:
    """Adapter between the conversation context and the template engine.

    Args:
        settings: engine configuration; read from the configuration
            file if not given.
        diagnostics: sink of the warnings emitted while rendering.
        raise_hook: callback invoked when a template calls the raise
            signal; defaults to `diagnostics.raise_exception`.
    """

    def __init__(
        self,
        settings: RenderSettings | None = None,
        diagnostics: TemplateDiagnostics | None = None,
        raise_hook: Callable[[str], object] | None = None,
    ) -> None:
        self.settings = settings if settings is not None else Settings().render
        self.diagnostics = (
            diagnostics if diagnostics is not None else TemplateDiagnostics()
        )
        self._raise_hook = (
            raise_hook
            if raise_hook is not None
            else self.diagnostics.raise_exception
        )

        self.environment = PromptEnvironment(
            snake_case_properties=self.settings.snake_case_properties,
            trim_blocks=self.settings.trim_blocks,
            lstrip_blocks=self.settings.lstrip_blocks,
            keep_trailing_newline=self.settings.keep_trailing_newline,
            extensions=['jinja2.ext.loopcontrols'],
        )
        self.environment.filters['tojson'] = tojson
        self.environment.globals[self.settings.raise_function_name] = (
            self._raise_signal
        )

        # compiled templates, keyed by source
        self._compile = lru_cache(
            maxsize=self.settings.template_cache_size
        )(self.environment.from_string)

    def _raise_signal(self, message: Any = "") -> str:
        message = str(message)
        raised = _raised_messages.get()
        if raised is not None:
            raised.append(f"{self.settings.raise_function_name}: {message}")
        self._raise_hook(message)
        return ""

    def render(
        self, template: str, context: Mapping[str, Any]
    ) -> RenderOutcome:
        """Render `template` with the variables in `context`.

        Returns:
            a RenderOutcome with the (possibly partial) output, the
            messages of the raise signal and the errors reported while
            compiling or rendering the template.
        """
        chunks: list[str] = []
        errors: list[str] = []
        raised: list[str] = []
        token = _raised_messages.set(raised)
        try:
            compiled = self._compile(template)
            for chunk in compiled.generate(dict(context)):
                chunks.append(chunk)
        except TemplateError as e:
            errors.append(_describe_error(e))
        except Exception as e:
            # raised by expressions evaluated in the template, including
            # RecursionError from recursive macros
            errors.append(f"{type(e).__name__}: {e}")
        finally:
            _raised_messages.reset(token)

        # raise signal messages were logged by the hook
        self.diagnostics.template_errors(errors)
        return RenderOutcome(output="".join(chunks), errors=raised + errors)


def _describe_error(error: TemplateError) -> str:
    lineno = getattr(error, 'lineno', None)
    description = f"{type(error).__name__}: {error.message or ''}"
    if lineno is not None:
        description += f" (line {lineno})"
    return description


@lru_cache(maxsize=1)
def default_renderer() -> TemplateRenderer:
    """Return the renderer shared by builders that were not given one."""
    return TemplateRenderer()
