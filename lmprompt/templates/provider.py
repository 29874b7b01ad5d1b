"""
Sources of chat templates.

A template provider exposes the chat templates shipped with a model,
keyed by variant name ('default', 'tool', 'rag'), and the model's
end-of-sequence token. Any object with these two attributes may be
used as a provider; `TokenizerTemplates` is the concrete provider of
the package.

Hugging Face models ship their templates in `tokenizer_config.json`,
either as a single template string or as a list of named templates:

    ```json
    {
        "chat_template": [
            {"name": "default", "template": "..."},
            {"name": "tool_use", "template": "..."},
            {"name": "rag", "template": "..."}
        ],
        "eos_token": "<|im_end|>"
    }
    ```

A single string becomes the 'default' variant. The 'tool_use' name is
also made available as 'tool'.

Example:
    ```python
    provider = load_tokenizer_templates("models/Qwen2.5-0.5B-Instruct")
    support = PromptSupport(provider)
    ```
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

TOKENIZER_CONFIG_FILE = "tokenizer_config.json"

# variant names used by Hugging Face, mapped to the names of PromptVariant
_VARIANT_ALIASES: dict[str, str] = {'tool_use': 'tool'}


class TemplateProvider(Protocol):
    """The templates and end-of-sequence token of a model."""

    @property
    def prompt_templates(self) -> Mapping[str, str] | None: ...

    @property
    def eos_token(self) -> str: ...


class NamedTemplate(BaseModel):
    """An entry of the `chat_template` list of tokenizer_config.json"""

    name: str
    template: str

    model_config = ConfigDict(frozen=True, extra='allow')


class AddedToken(BaseModel):
    """A special token given as an object in tokenizer_config.json"""

    content: str

    model_config = ConfigDict(frozen=True, extra='allow')


class TokenizerConfig(BaseModel):
    """The fields of tokenizer_config.json read by this package."""

    chat_template: str | list[NamedTemplate] | None = None
    eos_token: str | AddedToken | None = None

    model_config = ConfigDict(extra='allow')


class TokenizerTemplates(BaseModel):
    """A template provider holding the templates in memory.

    Attributes:
        prompt_templates: the template sources keyed by variant name,
            or None if the model has no templates
        eos_token: the end-of-sequence token of the model
    """

    prompt_templates: dict[str, str] | None = None
    eos_token: str = Field(default="")

    model_config = ConfigDict(frozen=True, extra='forbid')

    @classmethod
    def from_tokenizer_config(
        cls, config: TokenizerConfig | Mapping[str, Any]
    ) -> 'TokenizerTemplates':
        if not isinstance(config, TokenizerConfig):
            config = TokenizerConfig.model_validate(config)

        templates: dict[str, str] | None = None
        match config.chat_template:
            case str() as source:
                templates = {'default': source}
            case list() as entries:
                templates = {}
                for entry in entries:
                    templates[entry.name] = entry.template
                for name, alias in _VARIANT_ALIASES.items():
                    if name in templates and alias not in templates:
                        templates[alias] = templates[name]
            case None:
                pass

        match config.eos_token:
            case AddedToken(content=content):
                eos_token = content
            case str() as token:
                eos_token = token
            case _:
                eos_token = ""

        return cls(prompt_templates=templates, eos_token=eos_token)


def load_tokenizer_templates(path: str | Path) -> TokenizerTemplates:
    """Read the chat templates of a model from its tokenizer
    configuration.

    Args:
        path: the tokenizer_config.json file, or the model folder
            containing it

    Returns:
        the templates provider of the model

    Raises:
        FileNotFoundError: if the configuration file does not exist
        pydantic.ValidationError: if the file content is invalid
    """
    path = Path(path)
    if path.is_dir():
        path = path / TOKENIZER_CONFIG_FILE
    if not path.exists():
        raise FileNotFoundError(f"Tokenizer configuration not found: {path}")

    config = TokenizerConfig.model_validate_json(
        path.read_text(encoding="utf-8")
    )
    return TokenizerTemplates.from_tokenizer_config(config)
