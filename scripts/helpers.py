import re
import json
import logging

_LOG = logging.getLogger(__name__)

_FENCE = re.compile(r"```(?:json)?\s*({[\s\S]*?})\s*```")


def _balanced_objects(text: str) -> list[str]:
    """Every top-level `{...}` span, ignoring braces inside strings."""
    spans: list[str] = []
    depth, start = 0, -1
    in_str = escaped = False
    for i, ch in enumerate(text):
        if in_str:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_str = False
            continue
        if ch == '"':
            in_str = depth > 0
        elif ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                spans.append(text[start:i + 1])
    return spans


def _loads_dict(text: str) -> dict | None:
    try:
        data = json.loads(text)
    except (ValueError, TypeError):
        return None
    return data if isinstance(data, dict) else None


def extract_clean_json(raw: str | dict | None) -> dict:
    """
    Pull a JSON object out of an LLM reply.

    Tries, in order: the whole text, a ```json fenced block, then the
    largest balanced brace-delimited substring.  Returns {} when nothing
    parses so callers can switch to their fallback.
    """
    if isinstance(raw, dict):
        return raw
    if not raw:
        return {}

    data = _loads_dict(raw.strip())
    if data is not None:
        return data

    match = _FENCE.search(raw)
    if match:
        data = _loads_dict(match.group(1))
        if data is not None:
            return data

    for candidate in sorted(_balanced_objects(raw), key=len, reverse=True):
        data = _loads_dict(candidate)
        if data is not None:
            return data

    _LOG.warning("Failed to extract JSON from model output (%d chars)", len(raw))
    return {}
