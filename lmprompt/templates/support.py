"""
Entry point for building the prompts of a model from its chat
templates.

Example:
    ```python
    from lmprompt.templates import PromptSupport, TokenizerTemplates

    provider = TokenizerTemplates(
        prompt_templates={
            'default': "{% for m in messages %}"
            "{{ m.role }}:{{ m.content }} {% endfor %}"
        },
        eos_token="</s>",
    )
    support = PromptSupport(provider)
    if support.has_prompt_templates():
        prompt = (
            support.builder()
            .add_system_message("be terse")
            .add_user_message("hello")
            .build()
        )
        # 'system:be terse user:hello '
    ```
"""

from pathlib import Path

from lmprompt.config.config import Settings, load_settings
from lmprompt.utils.logging import LoggerBase

from .builder import PromptBuilder
from .diagnostics import TemplateDiagnostics
from .provider import TemplateProvider
from .renderer import TemplateRenderer, default_renderer


class PromptSupport:
    """Creates conversation builders for a model.

    Args:
        provider: the templates and end-of-sequence token of the model
        renderer: the renderer used by the builders. If not given, the
            renderer shared by the process is used, unless settings or
            a logger are given.
        settings: builder defaults and engine settings, or the path of
            a TOML file to read them from. If not given, they are read
            from config.toml.
        logger: a logger receiving the template warnings.

    Raises:
        FileNotFoundError: if the settings file does not exist
        ValueError: if the settings file is invalid
    """

    def __init__(
        self,
        provider: TemplateProvider,
        renderer: TemplateRenderer | None = None,
        *,
        settings: Settings | str | Path | None = None,
        logger: LoggerBase | None = None,
    ) -> None:
        self.provider = provider
        if isinstance(settings, (str, Path)):
            settings = load_settings(settings)
        if renderer is None:
            if settings is None and logger is None:
                renderer = default_renderer()
            else:
                renderer = TemplateRenderer(
                    settings.render if settings is not None else None,
                    TemplateDiagnostics(logger),
                )
        self.settings = settings if settings is not None else Settings()
        self.renderer = renderer

    def has_prompt_templates(self) -> bool:
        return bool(self.provider.prompt_templates)

    def builder(self) -> PromptBuilder:
        return PromptBuilder(
            self.provider,
            self.renderer,
            variant=self.settings.builder.default_variant,
            add_generation_prompt=self.settings.builder.add_generation_prompt,
        )
