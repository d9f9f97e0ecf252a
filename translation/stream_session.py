"""
Per-request streaming state machine for the two public event grammars.
"""
import logging
import uuid
from enum import Enum
from typing import List, Optional

from . import response_builders as builders
from .response_builders import ANTHROPIC_FORMAT, OPENAI_FORMAT

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    INIT = "init"
    OPENED = "opened"
    EMITTING = "emitting"
    CLOSED = "closed"
    ERRORED = "errored"


TERMINAL_STATES = (SessionState.CLOSED, SessionState.ERRORED)


class StreamSession:
    """
    Turns content fragments into framed SSE events.

    Every transition returns the list of frames to write, so the caller owns the
    transport. ``CLOSED`` and ``ERRORED`` are terminal: further calls emit nothing.
    """

    def __init__(self, format_type: str, model: str, message_id: Optional[str] = None):
        if format_type not in (OPENAI_FORMAT, ANTHROPIC_FORMAT):
            raise ValueError(f"Unknown response format: {format_type}")
        self.format_type = format_type
        self.model = model
        if message_id is None:
            prefix = "msg_" if format_type == ANTHROPIC_FORMAT else "chatcmpl-"
            message_id = f"{prefix}{uuid.uuid4().hex[:8]}"
        self.message_id = message_id
        self.state = SessionState.INIT
        self._fragments: List[str] = []

    @property
    def is_anthropic(self) -> bool:
        return self.format_type == ANTHROPIC_FORMAT

    @property
    def final_text(self) -> str:
        return "".join(self._fragments)

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def open(self) -> List[str]:
        if self.state != SessionState.INIT:
            return []
        self.state = SessionState.OPENED
        if self.is_anthropic:
            return [
                builders.anthropic_message_start(self.message_id, self.model),
                builders.anthropic_content_block_start(),
            ]
        return [builders.openai_chunk(self.message_id, self.model, {"role": "assistant", "content": ""})]

    def push(self, fragment: str) -> List[str]:
        """Accumulate one fragment and return its delta event"""
        if self.finished or not fragment:
            return []
        frames = self.open() if self.state == SessionState.INIT else []
        self.state = SessionState.EMITTING
        self._fragments.append(fragment)
        if self.is_anthropic:
            frames.append(builders.anthropic_content_block_delta(fragment))
        else:
            frames.append(builders.openai_chunk(self.message_id, self.model, {"content": fragment}))
        return frames

    def finish(self) -> List[str]:
        """Close the stream after upstream exhaustion"""
        if self.finished:
            return []
        frames = self.open() if self.state == SessionState.INIT else []
        self.state = SessionState.CLOSED
        if self.is_anthropic:
            frames.extend([
                builders.anthropic_content_block_stop(),
                builders.anthropic_message_delta(),
                builders.anthropic_message_stop(self.message_id, self.model, self.final_text),
            ])
        else:
            frames.append(builders.openai_chunk(self.message_id, self.model, {}, finish_reason="stop"))
            frames.append(builders.STREAM_DONE)
        return frames

    def fail(self, message: str) -> List[str]:
        """Emit one inline error event; the HTTP status is already sent"""
        if self.finished:
            return []
        logger.debug(f"Stream session {self.message_id} errored: {message}")
        self.state = SessionState.ERRORED
        if self.is_anthropic:
            return [builders.anthropic_error(message)]
        return [builders.openai_error(message)]
