"""Stub Generator — stands in for AnthropicGenerator behind the Generator protocol.

Invariants:
    - Records every (system_prompt, user_message) pair it receives
    - Returns queued replies in order; raises when a queued item is an exception
    - Falls back to a fixed reply once the queue is drained
"""

import asyncio


class StubGenerator:
    """Scripted Generator for route and gateway tests."""

    def __init__(self, replies=None, model_id="stub-model", delay=0.0):
        self._replies = list(replies or [])
        self.model_id = model_id
        self.delay = delay
        self.calls = []

    def queue(self, *replies):
        self._replies.extend(replies)

    async def generate(self, system_prompt, user_message):
        self.calls.append(
            {"system_prompt": system_prompt, "user_message": user_message},
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        reply = self._replies.pop(0) if self._replies else "  Refined statement.  "
        if isinstance(reply, BaseException):
            raise reply
        return reply
