"""
Primary Resolver

DESIGN DECISION: The language model is a CLASSIFIER, not an actor.
It reads the user's message and names one of four actions with its
parameters. Everything after that (validation, defaults, storage) is
deterministic code.

BOUNDARIES:
- CAN: choose an action and propose parameters
- CANNOT: invent an action outside the fixed set
- CANNOT: write to the ledger
- NEVER raises to its caller. A model that is down, slow, chatty or
  wrong is an ordinary outcome and simply hands over to the fallback.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional

import google.generativeai as genai
import structlog
from pydantic import ValidationError

from finagent.config import get_settings
from finagent.config.settings import GeminiSettings
from finagent.models.actions import ResolvedAction, parse_action


logger = structlog.get_logger(__name__)


SYSTEM_INSTRUCTION = """You are a financial health assistant. Help users track expenses, manage bills, and set savings goals.

Available actions:
- add_expense: Add a new expense
  parameters: {"amount": number, "category": string, "description": string, "recurring": boolean}
- add_bill: Add a recurring bill or payment reminder
  parameters: {"name": string, "amount": number, "dueDate": "YYYY-MM-DD", "category": string, "recurring": boolean}
- set_savings_goal: Set a savings target
  parameters: {"name": string, "targetAmount": number, "targetDate": "YYYY-MM-DD", "monthlyContribution": number}
- get_summary: Get financial overview
  parameters: {}

IMPORTANT: You must respond with ONLY valid JSON. No additional text or formatting.

Example response:
{"action": "add_expense", "parameters": {"amount": 50, "category": "food", "description": "groceries", "recurring": false}}"""


class CompletionUnavailableError(Exception):
    """The completion reply could not be turned into an action."""
    pass


class CompletionClient(ABC):
    """Black-box text completion capability."""

    @abstractmethod
    async def complete(self, system_instruction: str, message: str) -> Any:
        """
        Send one instruction + user message pair.

        Returns the model's reply: usually a string, but a client may
        return an already-decoded object.
        """
        pass


class GeminiCompletionClient(CompletionClient):
    """Gemini-backed completion client."""

    def __init__(self, settings: Optional[GeminiSettings] = None):
        self._settings = settings or get_settings().gemini
        self._configure_genai()

    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)

    async def complete(self, system_instruction: str, message: str) -> Any:
        model = genai.GenerativeModel(
            model_name=self._settings.model_name,
            system_instruction=system_instruction,
            generation_config={
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
                "response_mime_type": "application/json",
            },
        )
        response = await model.generate_content_async(message)
        return response.text


def decode_reply(reply: Any) -> ResolvedAction:
    """
    Turn a completion reply into a validated action.

    Raises:
        CompletionUnavailableError: for anything that is not a single JSON
            object naming a supported action with valid parameters
    """
    if isinstance(reply, str):
        try:
            data = json.loads(reply.strip())
        except json.JSONDecodeError as e:
            raise CompletionUnavailableError(f"Reply is not JSON: {e}")
    elif isinstance(reply, Mapping):
        data = reply
    else:
        raise CompletionUnavailableError(
            f"Unsupported reply type: {type(reply).__name__}"
        )

    if not isinstance(data, Mapping):
        raise CompletionUnavailableError("Reply is not a JSON object")

    action = data.get("action")
    parameters = data.get("parameters") or {}
    if not isinstance(action, str):
        raise CompletionUnavailableError("Reply has no action name")
    if not isinstance(parameters, Mapping):
        raise CompletionUnavailableError("Reply parameters are not an object")

    try:
        return parse_action(action, dict(parameters))
    except KeyError:
        raise CompletionUnavailableError(f"Unrecognized action: {action}")
    except ValidationError as e:
        raise CompletionUnavailableError(
            f"Parameters violate the {action} contract: {e.error_count()} errors"
        )


class PrimaryResolver:
    """
    Model-driven resolver. One attempt per message, no retries.
    """

    def __init__(
        self,
        client: Optional[CompletionClient] = None,
        timeout_seconds: Optional[float] = None,
        system_instruction: str = SYSTEM_INSTRUCTION,
    ):
        self._client = client
        self._timeout = timeout_seconds
        self._system_instruction = system_instruction

    async def resolve(
        self,
        message: str,
    ) -> tuple[Optional[ResolvedAction], Optional[str]]:
        """
        Ask the model for an action.

        Returns:
            (action, None) on success
            (None, reason) when primary resolution is unavailable
        """
        if self._client is None:
            return None, "primary resolver not configured"

        try:
            call = self._client.complete(self._system_instruction, message)
            if self._timeout is not None:
                reply = await asyncio.wait_for(call, timeout=self._timeout)
            else:
                reply = await call
        except asyncio.TimeoutError:
            logger.warning("completion_timeout", timeout_seconds=self._timeout)
            return None, "completion timed out"
        except Exception as e:
            logger.warning("completion_failed", error=str(e))
            return None, f"completion failed: {e}"

        try:
            return decode_reply(reply), None
        except CompletionUnavailableError as e:
            logger.warning("completion_unusable", error=str(e))
            return None, str(e)
