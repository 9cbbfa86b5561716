"""Errors raised by the packet flows."""


class DemoError(Exception):
    """Base class for errors reported to API callers."""

    category = "internal"

    def __init__(self, message: str, step: str | None = None):
        super().__init__(message)
        self.message = message
        self.step = step


class ValidationError(DemoError):
    """Bad caller input. Raised before any packet event is published."""

    category = "validation"


class FlowError(DemoError):
    """A messaging toolkit call failed part-way through a flow."""

    category = "collaborator"

    def __init__(self, message: str, step: str):
        super().__init__(message, step)
