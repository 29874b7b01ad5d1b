"""Errors raised to the callers of the prompt builder."""


class PromptSupportError(Exception):
    """Base class of the errors raised by the package."""


class InvalidStateError(PromptSupportError, RuntimeError):
    """The builder was used in a way its current state does not allow,
    e.g. tool declarations were set twice."""


class UnsupportedTemplateError(PromptSupportError, NotImplementedError):
    """The model has no prompt templates, or none for the selected
    variant."""
