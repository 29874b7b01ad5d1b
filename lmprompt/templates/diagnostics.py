"""
Diagnostics emitted while rendering chat templates.

Chat templates are third-party content shipped with a model. A
template may reject a conversation by calling a function exposed by
the host, conventionally `raise_exception`:

    ```jinja
    {% if messages[0].role == 'system' %}
    {{ raise_exception('System role not supported') }}
    {% endif %}
    ```

The call does not abort the render. The message is logged at warning
level and added to the errors of the render; rendering continues.
Errors reported by the template engine are logged in the same way.
"""

from collections.abc import Sequence

from lmprompt.utils.logging import LoggerBase, get_logger


class TemplateDiagnostics:
    """Sink of the warnings produced while rendering templates.

    Args:
        logger: the logger receiving the warnings. Inject a
            LoglistLogger to inspect them.
    """

    def __init__(self, logger: LoggerBase | None = None) -> None:
        self.logger: LoggerBase = (
            logger if logger is not None else get_logger(__name__)
        )

    def raise_exception(self, message: str) -> str:
        """The raise signal exposed to templates. Returns an empty
        string, so that nothing is added to the rendered output."""
        self.logger.warning(f"Prompt template error: {message}")
        return ""

    def template_errors(self, errors: Sequence[str]) -> None:
        if errors:
            self.logger.warning(f"Prompt template errors: {list(errors)}")
