"""Segment parser for streamed message text.

Splits a (possibly partial) message buffer into prose and fenced code
segments. The parser keeps no state between calls: the renderer re-parses the
full buffer after every fragment, which keeps an unterminated fence rendering
as a live code block while the response is still arriving.
"""

import re

from .config import DEFAULT_CODE_LANGUAGE, FENCE
from .models import CodeSegment, ProseSegment, Segment

# Opening fence, optional language token, optional newline, then content up to
# the closing fence or the end of the buffer (unterminated = still streaming).
_FENCE_PATTERN = re.compile(r"```(\w*)(\n?)(.*?)(?:```|\Z)", re.DOTALL)


def parse_segments(text: str) -> list[Segment]:
    """Parse a message buffer into ordered segments.

    Args:
        text: Complete or partial message text

    Returns:
        Segments in document order. Empty prose is never emitted, and an
        empty buffer yields an empty list.

    Examples:
        >>> parse_segments("a```py\\nprint(1)```b")  # doctest: +NORMALIZE_WHITESPACE
        [ProseSegment(kind='prose', content='a'),
         CodeSegment(kind='code', language='py', content='print(1)'),
         ProseSegment(kind='prose', content='b')]
    """
    segments: list[Segment] = []
    last_index = 0

    for match in _FENCE_PATTERN.finditer(text):
        if match.start() > last_index:
            segments.append(ProseSegment(content=text[last_index:match.start()]))

        info = match.group(1)
        segments.append(CodeSegment(
            language=info or DEFAULT_CODE_LANGUAGE,
            content=match.group(3),
            fence_info=None if info else "",
            fence_newline=bool(match.group(2)),
        ))
        last_index = match.end()

    if last_index < len(text):
        segments.append(ProseSegment(content=text[last_index:]))

    return segments


def render_fences(segments: list[Segment]) -> str:
    """Re-insert fence syntax and join segments back into message text.

    Code segments are written with their opening fence as it was parsed,
    the content and a closing fence, so text whose fences are all closed
    comes back unchanged. An unterminated block gets its closing fence.
    """
    parts = []
    for segment in segments:
        if isinstance(segment, CodeSegment):
            info = segment.language if segment.fence_info is None else segment.fence_info
            newline = "\n" if segment.fence_newline else ""
            parts.append(f"{FENCE}{info}{newline}{segment.content}{FENCE}")
        else:
            parts.append(segment.content)
    return "".join(parts)
