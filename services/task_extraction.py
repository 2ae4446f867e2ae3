import json
import logging
import re
from datetime import date
from typing import Any, Dict, Optional

from openai import AsyncOpenAI

from core.constants.voice_constants import ASSISTANT_USER_NAME, EXTRACTION_MODEL
from core.utils.openai_utils import api_error_message, get_openai_client
from services.fallback_tasks import fallback_tasks_from_transcript

logger = logging.getLogger(__name__)

CALENDAR_CONTEXT = "calendar"
TODO_CONTEXT = "todo"

_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*")

CALENDAR_PROMPT = """You are a calendar assistant for {user}. Today is {day_name}, {today}.
Extract calendar events from user speech. Return ONLY valid JSON, no markdown, no code blocks:
{{"events": [{{"title": "string", "date": "YYYY-MM-DD", "time": "HH:MM" or null, "notes": "string or empty"}}]}}
If user says "tomorrow", "next Monday", etc., calculate the correct date.
If no specific time mentioned, set time to null.
Put extra context in notes.
Always return an array, even if empty."""

TODO_PROMPT = """You are a to-do list assistant for {user}.
Extract tasks from user speech. Return ONLY valid JSON, no markdown, no code blocks:
{{"tasks": [{{"title": "string", "priority": "high" or "medium" or "low", "notes": "string or empty"}}]}}
Infer priority: "urgent", "ASAP", "important" = high. "whenever", "at some point" = low. Default = medium.
Extract extra details as notes.
If transcript has at least one plausible actionable item, return at least one task.
Only return an empty array for pure filler/greeting/noise (e.g. "oh", "um", "hello")."""


class ExtractionError(Exception):
    pass


def build_system_prompt(context: str, today: Optional[date] = None) -> str:
    if context == CALENDAR_CONTEXT:
        today = today or date.today()
        return CALENDAR_PROMPT.format(
            user=ASSISTANT_USER_NAME,
            day_name=today.strftime("%A"),
            today=today.isoformat(),
        )
    return TODO_PROMPT.format(user=ASSISTANT_USER_NAME)


def parse_model_json(content: str) -> Dict[str, Any]:
    """Parse model output as JSON, tolerating Markdown code fences."""
    json_str = content.strip()
    if "```" in json_str:
        json_str = _CODE_FENCE_RE.sub("", json_str).strip()
    parsed = json.loads(json_str)
    if not isinstance(parsed, dict):
        raise ValueError("Model returned JSON that is not an object")
    return parsed


class TaskExtractionService:
    def __init__(self, client: Optional[AsyncOpenAI] = None):
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        return self._client or get_openai_client()

    async def parse_transcript(
        self, transcript: str, context: str, today: Optional[date] = None
    ) -> Dict[str, Any]:
        """
        Extract calendar events or to-do tasks from a transcript using OpenAI's GPT model.

        Args:
            transcript (str): Recognized speech text
            context (str): "calendar" for events, anything else for tasks
            today (Optional[date]): Reference date for relative dates

        Returns:
            Dict[str, Any]: The model's JSON object, {"events": [...]} or {"tasks": [...]}

        Raises:
            ExtractionError: If the API call fails or the output is not JSON
        """
        try:
            response = await self.client.chat.completions.create(
                model=EXTRACTION_MODEL,
                messages=[
                    {"role": "system", "content": build_system_prompt(context, today)},
                    {"role": "user", "content": transcript},
                ],
                temperature=0.2,
                max_tokens=500,
            )
            content = response.choices[0].message.content or ""
            return parse_model_json(content)
        except Exception as e:
            logger.error("GPT API error: %s", api_error_message(e))
            raise ExtractionError(f"Parsing failed: {api_error_message(e)}") from e

    @staticmethod
    def ensure_tasks(parsed: Dict[str, Any], transcript: str) -> Dict[str, Any]:
        """Guarantee a tasks list, falling back to heuristics when the model found none."""
        if not isinstance(parsed.get("tasks"), list):
            parsed["tasks"] = []

        if not parsed["tasks"]:
            fallback = fallback_tasks_from_transcript(transcript)
            if fallback:
                parsed["tasks"] = [task.model_dump() for task in fallback]
                logger.info("Applied fallback task extraction")

        logger.info("Parsed tasks count: %d", len(parsed["tasks"]))
        return parsed
