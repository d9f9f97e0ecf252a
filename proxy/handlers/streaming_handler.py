"""
Upstream draining and SSE emission for Amazon Q replies.
"""
import asyncio
import codecs
import logging
import time
from typing import AsyncIterator, Optional, Union

import httpx

from config import GatewayConfig
from errors import StreamFault
from translation import StreamSession, UpstreamBuffer, collect_reply_text, parse_fragment
from ..logging_utils import log_response

logger = logging.getLogger(__name__)

# Marks upstream exhaustion on the fragment queue
_END = object()

QueueItem = Union[str, BaseException, object]


async def _produce_fragments(
    response: httpx.Response,
    queue: "asyncio.Queue[QueueItem]",
    config: GatewayConfig,
    request_id: str,
) -> None:
    """Read the upstream body and queue each extracted fragment in order

    Ends the queue with ``_END`` on exhaustion or with the failure that
    stopped reading.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    buffer = UpstreamBuffer(config.buffer_max_size, config.buffer_overflow_policy)

    async def emit(text: str) -> None:
        for obj in buffer.feed(text):
            content = parse_fragment(obj)
            if content:
                await queue.put(content)

    try:
        async for chunk in response.aiter_bytes(config.stream_chunk_size):
            await emit(decoder.decode(chunk))
        await emit(decoder.decode(b"", final=True))
    except StreamFault as e:
        await queue.put(e)
        return
    except httpx.HTTPError as e:
        logger.error(f"[{request_id}] Upstream read failed: {e}")
        await queue.put(StreamFault(f"Upstream read failed: {e}"))
        return
    except Exception as e:
        logger.exception(f"[{request_id}] Unexpected error while reading upstream")
        await queue.put(StreamFault(f"Stream translation failed: {e}"))
        return

    if len(buffer):
        logger.debug(f"[{request_id}] Discarding {len(buffer)} trailing upstream characters")
    await queue.put(_END)


async def stream_upstream_events(
    response: httpx.Response,
    session: StreamSession,
    config: GatewayConfig,
    request_id: str,
) -> AsyncIterator[str]:
    """Translate an open upstream response into the session's SSE frames

    Fragments are forwarded as soon as they are extracted. Closing this
    generator (client disconnect) cancels the reader and closes the upstream
    response.
    """
    start_time = time.time()
    queue: "asyncio.Queue[QueueItem]" = asyncio.Queue(maxsize=config.stream_queue_size)
    producer = asyncio.create_task(_produce_fragments(response, queue, config, request_id))

    try:
        for frame in session.open():
            yield frame

        while True:
            item = await queue.get()
            if item is _END:
                break
            if isinstance(item, BaseException):
                logger.error(f"[{request_id}] Stream fault: {item}")
                for frame in session.fail(str(item)):
                    yield frame
                return
            for frame in session.push(item):
                yield frame

        for frame in session.finish():
            yield frame

        if config.log_responses:
            elapsed_ms = int((time.time() - start_time) * 1000)
            log_response(request_id, session.final_text, elapsed_ms, streamed=True, max_length=config.max_log_length)
    finally:
        if not producer.done():
            logger.debug(f"[{request_id}] Stream closed early, cancelling upstream reader")
            producer.cancel()
        await asyncio.gather(producer, return_exceptions=True)
        await response.aclose()


async def collect_upstream_text(
    response: httpx.Response,
    config: Optional[GatewayConfig] = None,
    request_id: str = "",
) -> str:
    """Drain the whole upstream body and assemble the batch reply text"""
    start_time = time.time()
    try:
        raw = await response.aread()
    except httpx.HTTPError as e:
        logger.error(f"[{request_id}] Upstream read failed: {e}")
        raise StreamFault(f"Upstream read failed: {e}", status_code=502) from e
    finally:
        await response.aclose()

    text = collect_reply_text(raw.decode("utf-8", errors="replace"))
    if config is not None and config.log_responses:
        elapsed_ms = int((time.time() - start_time) * 1000)
        log_response(request_id, text, elapsed_ms, streamed=False, max_length=config.max_log_length)
    return text
