# pyright: reportUnusedImport=false
# flake8: noqa

from .templates import (
    PromptSupport,
    PromptBuilder,
    PromptVariant,
    ToolCall,
    ToolResult,
    Tool,
    TokenizerTemplates,
    load_tokenizer_templates,
    InvalidStateError,
    UnsupportedTemplateError,
)
