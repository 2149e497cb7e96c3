"""Coach chat — answer athlete questions with an OpenAI chat model."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import openai

from climbcoach.engine.coach_prompt import (
    NO_DATA_REPLY,
    build_system_prompt,
    fallback_reply,
    latest_assessment,
)

logger = logging.getLogger(__name__)

ERROR_REPLY = "I'm having trouble analyzing your latest assessment data. Please try again in a moment!"


class CoachChat:
    """Stateless chat: every reply is built from the athlete's latest assessment.

    Without an OpenAI client the canned keyword replies are used instead.
    """

    def __init__(
        self,
        client: Optional[openai.OpenAI] = None,
        model: str = "gpt-3.5-turbo",
        temperature: float = 0.7,
        max_tokens: int = 500,
        presence_penalty: float = 0.3,
        frequency_penalty: float = 0.3,
    ) -> None:
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.presence_penalty = presence_penalty
        self.frequency_penalty = frequency_penalty

    @classmethod
    def from_api_key(cls, api_key: Optional[str], model: str = "gpt-3.5-turbo") -> "CoachChat":
        client = openai.OpenAI(api_key=api_key) if api_key else None
        return cls(client=client, model=model)

    def reply(self, message: str, records: Sequence[Dict[str, Any]]) -> str:
        latest = latest_assessment(records)
        if latest is None:
            return NO_DATA_REPLY
        if self.client is None:
            return fallback_reply(message, latest)

        logger.info(
            "Sending assessment %s (%s) to %s",
            latest.get("id"), latest.get("assessment_date"), self.model,
        )
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": build_system_prompt(latest)},
                    {"role": "user", "content": message},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                presence_penalty=self.presence_penalty,
                frequency_penalty=self.frequency_penalty,
            )
        except openai.OpenAIError:
            logger.exception("Chat completion failed")
            return ERROR_REPLY

        content = response.choices[0].message.content
        return content or ERROR_REPLY
