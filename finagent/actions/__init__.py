"""Action execution package."""

from finagent.actions.executor import ActionExecutor, ActionValidationError

__all__ = ["ActionExecutor", "ActionValidationError"]
