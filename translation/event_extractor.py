"""
Extraction of ``{"content": ...}`` objects from the unframed Amazon Q byte stream.
"""
import json
import logging
from typing import Iterator, List, Optional, Tuple

from errors import BufferOverflowError

logger = logging.getLogger(__name__)

CONTENT_MARKER = '{"content":'

OVERFLOW_TRUNCATE = "truncate"
OVERFLOW_REJECT = "reject"


def extract_json_object(buffer: str, marker: str = CONTENT_MARKER) -> Tuple[Optional[str], str]:
    """
    Pull the first complete JSON object starting at ``marker`` out of ``buffer``.

    Braces are counted outside string literals only, and a backslash suppresses
    the next character, so ``{``, ``}`` and escaped quotes inside values do not
    disturb the nesting depth.

    Returns:
        ``(object_text, remaining)`` when an object closes, where ``remaining`` is
        everything after its closing brace; ``(None, buffer)`` unchanged when no
        marker is present or the object is still open.
    """
    start = buffer.find(marker)
    if start == -1:
        return None, buffer

    depth = 0
    in_string = False
    escape_next = False

    for i in range(start, len(buffer)):
        char = buffer[i]

        if escape_next:
            escape_next = False
            continue
        if char == "\\":
            escape_next = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue

        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return buffer[start:i + 1], buffer[i + 1:]

    return None, buffer


def iter_json_objects(buffer: str, marker: str = CONTENT_MARKER) -> Iterator[str]:
    """Yield every complete object in ``buffer``, in order"""
    remaining = buffer
    while True:
        obj, remaining = extract_json_object(remaining, marker)
        if obj is None:
            return
        yield obj


def parse_fragment(json_text: str) -> Optional[str]:
    """Return the ``content`` string of an extracted object, or None if unusable"""
    try:
        obj = json.loads(json_text)
    except json.JSONDecodeError as e:
        logger.debug(f"Skipping malformed upstream fragment: {e}")
        return None
    content = obj.get("content") if isinstance(obj, dict) else None
    return content if isinstance(content, str) else None


class UpstreamBuffer:
    """
    Growable text accumulator for one stream translation.

    Complete objects are drained on every feed. Text before the next marker is
    dropped, so only an open object counts toward the limit.
    When that object outgrows ``max_size`` the ``truncate`` policy keeps its newest
    ``max_size`` characters, which may cut an open object, while ``reject`` fails
    the stream with ``BufferOverflowError``.
    """

    def __init__(self, max_size: int = 10240, policy: str = OVERFLOW_TRUNCATE, marker: str = CONTENT_MARKER):
        if policy not in (OVERFLOW_TRUNCATE, OVERFLOW_REJECT):
            raise ValueError(f"Unknown buffer overflow policy: {policy}")
        self.max_size = max_size
        self.policy = policy
        self.marker = marker
        self._text = ""

    def __len__(self) -> int:
        return len(self._text)

    @property
    def pending(self) -> str:
        return self._text

    def feed(self, text: str) -> List[str]:
        """Append decoded text and return the objects it completed"""
        if text:
            self._text += text
        objects: List[str] = []
        while True:
            obj, self._text = extract_json_object(self._text, self.marker)
            if obj is None:
                break
            objects.append(obj)
        self._discard_before_marker()
        self._enforce_limit()
        return objects

    def _discard_before_marker(self) -> None:
        # Only text from an open marker onward can still become an object
        start = self._text.find(self.marker)
        if start > 0:
            self._text = self._text[start:]
        elif start == -1:
            # Keep a tail long enough to hold a marker split across chunks
            keep = len(self.marker) - 1
            self._text = self._text[-keep:] if keep else ""

    def _enforce_limit(self) -> None:
        if len(self._text) <= self.max_size:
            return
        if self.policy == OVERFLOW_REJECT:
            raise BufferOverflowError(
                f"Upstream fragment exceeded buffer limit of {self.max_size} characters"
            )
        dropped = len(self._text) - self.max_size
        self._text = self._text[-self.max_size:]
        logger.warning(f"Upstream buffer over {self.max_size} characters, dropped {dropped} oldest")


def collect_reply_text(raw: str) -> str:
    """
    Assemble a complete batch reply from the full upstream body.

    Fragments are concatenated in order. A body with no fragment at all falls
    back to its non-empty lines that are not SSE comments.
    """
    contents = []
    for obj in iter_json_objects(raw or ""):
        content = parse_fragment(obj)
        if content is not None:
            contents.append(content)

    if contents:
        return "".join(contents)

    printable = []
    for line in (raw or "").split("\n"):
        stripped = line.strip()
        if not stripped or stripped.startswith(":"):
            continue
        printable.append(stripped)
    return "\n".join(printable)
