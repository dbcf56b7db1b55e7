"""
Recover JSON objects from raw model output.

Models asked for JSON still wrap it in code fences, add commentary before or
after it, emit smart quotes or leak control characters. ``extract_json`` runs
a fixed sequence of recovery strategies and returns the first successful
parse; it only gives up when every strategy fails.
"""
import json
import re
from typing import Any, Callable, List, Optional, Tuple

from agents.generation.exceptions import ExtractionError
from setup_logging_optimized import get_logger

logger = get_logger(__name__)

_FENCE_RE = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)
_CONTROL_CHARS_RE = re.compile(r"[\u0000-\u001F]+")
_NEWLINES_RE = re.compile(r"(\r\n|\n|\r)")
# Some models emit `"key to=value"` in place of `"key": "value"`
_TO_EQUALS_RE = re.compile(r"\s*to=")

_SMART_QUOTES = {
    "“": '"',
    "”": '"',
    "„": '"',
    "«": '"',
    "»": '"',
    "‘": "'",
    "’": "'",
}

_PREVIEW_CHARS = 200


def _parse_direct(text: str) -> Optional[str]:
    return text


def _parse_fenced(text: str) -> Optional[str]:
    match = _FENCE_RE.search(text)
    if not match:
        return None
    return match.group(1).strip()


def _parse_outer_braces(text: str) -> Optional[str]:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start:end + 1]


def _strip_control_chars(text: str) -> Optional[str]:
    candidate = _parse_outer_braces(text.strip())
    if candidate is None:
        return None
    candidate = _NEWLINES_RE.sub(" ", candidate)
    return _CONTROL_CHARS_RE.sub("", candidate)


def _normalize_smart_quotes(text: str) -> Optional[str]:
    candidate = _strip_control_chars(text)
    if candidate is None:
        return None
    for smart, plain in _SMART_QUOTES.items():
        candidate = candidate.replace(smart, plain)
    return candidate


def _unescape_quotes(text: str) -> Optional[str]:
    candidate = _normalize_smart_quotes(text)
    if candidate is None:
        return None
    return candidate.replace('\\"', '"')


def clean_json_text(text: str) -> Optional[str]:
    """Every cleanup stage applied at once, including the ``to=`` repair."""
    candidate = _unescape_quotes(text)
    if candidate is None:
        return None
    return _TO_EQUALS_RE.sub('": "', candidate)


# Cleanup stages are cumulative; each is parsed before the next, lossier one runs
STRATEGIES: List[Tuple[str, Callable[[str], Optional[str]]]] = [
    ("direct", _parse_direct),
    ("code_fence", _parse_fenced),
    ("outer_braces", _parse_outer_braces),
    ("strip_control_chars", _strip_control_chars),
    ("smart_quotes", _normalize_smart_quotes),
    ("unescape_quotes", _unescape_quotes),
    ("aggressive_cleanup", clean_json_text),
]


def extract_json(raw_text: str, context: str = "unknown") -> Any:
    """
    Parse JSON out of a model response.

    Args:
        raw_text: Text content returned by the model
        context: Diagnostic label of the calling stage (segmentation, layout, ...)

    Returns:
        The parsed JSON value

    Raises:
        ExtractionError: if every strategy fails
    """
    if raw_text is None:
        raise ExtractionError(f"Failed to parse JSON for {context}: empty response", label=context)

    logger.debug(f"[JSON] Parsing response for {context} ({len(raw_text)} chars)")

    last_error: Optional[Exception] = None
    for name, candidate_fn in STRATEGIES:
        try:
            candidate = candidate_fn(raw_text)
            if candidate is None:
                continue
            parsed = json.loads(candidate)
            if name != "direct":
                logger.info(f"[JSON] Recovered {context} response via {name}")
            return parsed
        except (ValueError, TypeError) as e:
            last_error = e
            logger.debug(f"[JSON] Strategy {name} failed for {context}: {e}")

    preview = raw_text[:_PREVIEW_CHARS]
    logger.error(f"[JSON] All strategies failed for {context}; preview: {preview!r}")
    raise ExtractionError(
        f"Failed to parse JSON for {context}",
        label=context,
        preview=preview,
        cause=last_error,
    )
