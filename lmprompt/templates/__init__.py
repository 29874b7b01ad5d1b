# pyright: reportUnusedImport=false
# flake8: noqa

from .exceptions import (
    PromptSupportError,
    InvalidStateError,
    UnsupportedTemplateError,
)
from .tools import (
    ToolCall,
    ToolCallFunction,
    FunctionView,
    Tool,
    FunctionDefinition,
)
from .messages import (
    PromptRole,
    ContentMessage,
    ToolCallMessage,
    Message,
    ToolResult,
)
from .provider import (
    TemplateProvider,
    TokenizerTemplates,
    load_tokenizer_templates,
)
from .diagnostics import TemplateDiagnostics
from .renderer import (
    RenderOutcome,
    TemplateRenderer,
    default_renderer,
)
from .builder import PromptVariant, PromptBuilder
from .support import PromptSupport
