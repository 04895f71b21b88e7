"""Incremental reveal of an assistant message.

Purely presentational: the full message is already delivered; the reveal only
controls how much of it a UI shows at a time.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable

logger = logging.getLogger(__name__)

CODE_MARKERS = ("```", "function", "<", "const ", "let ")


def has_code_markers(content: str) -> bool:
    """Messages that look like code are shown at once instead of character by character."""
    return any(marker in content for marker in CODE_MARKERS)


class StreamingReveal:
    """Yields growing prefixes of ``content`` on a fixed interval."""

    def __init__(
        self,
        content: str,
        interval: float = 0.003,
        chunk_size: int = 1,
        on_update: Callable[[str], None] | None = None,
        on_complete: Callable[[], None] | None = None,
    ):
        self.content = content
        self.interval = interval
        self.chunk_size = max(1, chunk_size)
        self.on_update = on_update
        self.on_complete = on_complete
        self.displayed = ""
        self.done = False
        self.cancelled = False
        self._task: asyncio.Task | None = None

    @property
    def immediate(self) -> bool:
        return has_code_markers(self.content)

    async def stream(self) -> AsyncIterator[str]:
        if self.immediate:
            self.displayed = self.content
            yield self.displayed
        else:
            for end in range(self.chunk_size, len(self.content) + self.chunk_size, self.chunk_size):
                if self.cancelled:
                    return
                self.displayed = self.content[:end]
                yield self.displayed
                await asyncio.sleep(self.interval)

        if not self.cancelled:
            self.done = True
            if self.on_complete:
                self.on_complete()

    async def run(self) -> str:
        """Drive the reveal to the end, reporting each prefix to ``on_update``."""
        async for prefix in self.stream():
            if self.on_update:
                self.on_update(prefix)
        return self.displayed

    def start(self) -> asyncio.Task:
        """Run the reveal in the background on the current event loop."""
        if self._task is None:
            self._task = asyncio.create_task(self.run())
        return self._task

    def cancel(self) -> None:
        self.cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
