"""
Read and write configuration file.

The settings control how chat templates are compiled by the rendering
engine and the defaults given to new conversation builders.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

# The template variants a model may ship. Must match PromptVariant
# in lmprompt.templates.builder
VariantName = Literal['default', 'tool', 'rag']

DEFAULT_CONFIG_FILE = "config.toml"
ENV_PREFIX = "LMPROMPT_"


class RenderSettings(BaseModel):
    """
    Configuration of the template engine. The defaults reproduce the
    environment used by Hugging Face to render chat templates.

    Attributes:
        trim_blocks: remove the first newline after a block tag
        lstrip_blocks: strip whitespace before a block tag
        keep_trailing_newline: keep the final newline of the template
        snake_case_properties: resolve `tool_calls` to `toolCalls`
            when the snake_case name is not found on an object
        raise_function_name: name under which the raise signal is
            exposed to templates
        template_cache_size: number of compiled templates kept by a
            renderer
    """

    trim_blocks: bool = True
    lstrip_blocks: bool = True
    keep_trailing_newline: bool = False
    snake_case_properties: bool = True
    raise_function_name: str = Field(
        default="raise_exception",
        description="Template global signalling a validation failure",
    )
    template_cache_size: int = Field(default=32, ge=1)

    model_config = SettingsConfigDict(frozen=True, extra='forbid')

    @field_validator('raise_function_name', mode='after')
    @classmethod
    def validate_function_name(cls, name: str) -> str:
        cleaned = name.strip()
        if not cleaned.isidentifier():
            raise ValueError(
                f"Invalid template function name: '{name}'"
            )
        return cleaned


class BuilderSettings(BaseModel):
    """
    Defaults given to new conversation builders.

    Attributes:
        default_variant: the template variant used unless changed
        add_generation_prompt: value of the add_generation_prompt
            flag in the render context
    """

    default_variant: VariantName = 'default'
    add_generation_prompt: bool = True

    model_config = SettingsConfigDict(frozen=True, extra='forbid')


class Settings(BaseSettings):
    """
    A pydantic settings object containing the fields with the
    configuration information.

    Settings are read from the configuration file in TOML format and
    from environment variables with the LMPROMPT_ prefix (nested
    fields use a double underscore, e.g. LMPROMPT_RENDER__TRIM_BLOCKS).

    Attributes:
        render: template engine settings
        builder: conversation builder defaults
    """

    render: RenderSettings = Field(
        default_factory=RenderSettings,
        description="Template engine configuration",
    )
    builder: BuilderSettings = Field(
        default_factory=BuilderSettings,
        description="Conversation builder defaults",
    )

    model_config = SettingsConfigDict(
        toml_file=DEFAULT_CONFIG_FILE,
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        frozen=True,
        validate_assignment=True,
        extra='allow',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources."""
        return (
            init_settings,
            TomlConfigSettingsSource(settings_cls),
            env_settings,
        )


def load_settings(file_path: str | Path) -> Settings:
    """Read the settings from a TOML file in place of config.toml.
    Environment variables still override the values in the file.

    Args:
        file_path: the settings file

    Returns:
        the settings read from the file

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the file is not valid TOML or its values are
            not valid settings
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise FileNotFoundError(f"Settings file not found: {file_path}")

    class FileSettings(Settings):
        # merged with the configuration of Settings
        model_config = SettingsConfigDict(toml_file=file_path)

    try:
        return FileSettings()
    except ValueError as e:
        # ValidationError and TOMLDecodeError
        raise ValueError(
            f"Invalid settings in {file_path}:\n"
            + format_pydantic_error_message(str(e))
        ) from e


def format_pydantic_error_message(error_message: str) -> str:
    """Drop the documentation links from a pydantic error message."""
    return '\n'.join(
        line
        for line in error_message.splitlines()
        if "For further information visit" not in line
    )
