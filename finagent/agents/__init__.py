"""Intent resolver package."""

from finagent.agents.fallback import (
    FallbackResolver,
    classify_intent,
    help_message,
    monthly_contribution_for,
)
from finagent.agents.primary import (
    SYSTEM_INSTRUCTION,
    CompletionClient,
    CompletionUnavailableError,
    GeminiCompletionClient,
    PrimaryResolver,
    decode_reply,
)

__all__ = [
    "SYSTEM_INSTRUCTION",
    "CompletionClient",
    "CompletionUnavailableError",
    "FallbackResolver",
    "GeminiCompletionClient",
    "PrimaryResolver",
    "classify_intent",
    "decode_reply",
    "help_message",
    "monthly_contribution_for",
]
