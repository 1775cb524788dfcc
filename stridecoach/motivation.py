"""
Once-per-day motivational feedback.
"""

import asyncio
from datetime import date, datetime

from stridecoach.prompt_builder import MOTIVATION_SYSTEM_PROMPT, build_motivation_prompt


class DailyMotivation:
    """Serve one generated feedback message per user per calendar day."""

    def __init__(self, generator, store, max_tokens=None):
        self.generator = generator
        self.store = store
        self.max_tokens = max_tokens
        self._locks = {}

    def _lock_for(self, user_id):
        if user_id not in self._locks:
            self._locks[user_id] = asyncio.Lock()
        return self._locks[user_id]

    async def get(self, profile, derived, today=None):
        """
        Return today's message, generating it on the first request of the day.

        Args:
            profile: UserProfile
            derived: DerivedProgress used to build the prompt
            today: date the marker is compared against (defaults to today)

        Raises:
            GenerationFailure: the marker is left unchanged
        """
        if today is None:
            today = date.today()
        elif isinstance(today, datetime):
            today = today.date()

        async with self._lock_for(profile.user_id):
            cached = self.store.get_motivation(profile.user_id)
            if cached and cached[1] == today:
                return cached[0]

            prompt = build_motivation_prompt(profile, derived)
            text = await self.generator.generate(
                prompt,
                system=MOTIVATION_SYSTEM_PROMPT,
                max_tokens=self.max_tokens,
            )
            self.store.save_motivation(profile.user_id, text, today)
            return text
