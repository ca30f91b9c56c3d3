"""Tool result normalization and synthetic chunked delivery.

A `tools/call` result has no enforced schema, so the text to stream is
picked by trying each known shape in order:

1) `content` list: concatenated `text` of items whose `type` is "text"
2) top-level `text` string
3) pretty-printed JSON of the whole payload (always succeeds)

The chosen text is then sliced into fixed-size chunks and handed out with
a pacing delay between consecutive chunks.
"""

from __future__ import annotations

import json
import time
from typing import Any, Callable, Iterator, Optional, Sequence

from .constants import DEFAULT_CHUNK_DELAY_SECONDS, DEFAULT_CHUNK_SIZE

ShapeDecoder = Callable[[Any], Optional[str]]


def _content_items_text(result: Any) -> Optional[str]:
    if not isinstance(result, dict):
        return None
    content = result.get("content")
    if not isinstance(content, list):
        return None
    parts = []
    for item in content:
        if isinstance(item, dict) and item.get("type") == "text" and isinstance(item.get("text"), str):
            parts.append(item["text"])
    return "".join(parts)


def _top_level_text(result: Any) -> Optional[str]:
    if isinstance(result, dict) and isinstance(result.get("text"), str):
        return result["text"]
    return None


def _pretty_json(result: Any) -> str:
    return json.dumps(result, indent=2, ensure_ascii=False, default=str)


SHAPE_DECODERS: Sequence[ShapeDecoder] = (_content_items_text, _top_level_text)


def extract_text(result: Any) -> str:
    """Return the text to stream for a tool result payload."""
    for decode in SHAPE_DECODERS:
        text = decode(result)
        if text is not None:
            return text
    return _pretty_json(result)


def iter_chunks(text: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[str]:
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")
    for start in range(0, len(text), chunk_size):
        yield text[start:start + chunk_size]


def paced_chunks(
    text: str,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    delay_s: float = DEFAULT_CHUNK_DELAY_SECONDS,
) -> Iterator[str]:
    """Lazily yield chunks of `text`, sleeping `delay_s` between them.

    The generator is finite and not restartable. A consumer that stops
    iterating cancels the remaining delivery.
    """
    for index, chunk in enumerate(iter_chunks(text, chunk_size)):
        if index and delay_s > 0:
            time.sleep(delay_s)
        yield chunk


def stream_text(
    text: str,
    on_chunk: Callable[[str], Any],
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    delay_s: float = DEFAULT_CHUNK_DELAY_SECONDS,
) -> int:
    """Push every chunk of `text` to `on_chunk`; return the number of chunks."""
    count = 0
    for chunk in paced_chunks(text, chunk_size=chunk_size, delay_s=delay_s):
        on_chunk(chunk)
        count += 1
    return count


def deliver(
    result: Any,
    on_chunk: Callable[[str], Any],
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    delay_s: float = DEFAULT_CHUNK_DELAY_SECONDS,
) -> str:
    text = extract_text(result)
    stream_text(text, on_chunk, chunk_size=chunk_size, delay_s=delay_s)
    return text
