"""
Structured-text validation for generator output.

The generator is told to answer with a bare JSON object but routinely wraps it
in prose or markdown fences, leaves trailing commas or comments behind, or
drops fields. Everything here tolerates that and never raises to the caller,
except ``loads_permissive`` which is the shared parser underneath.
"""
import json
import re
from typing import Any, Optional

from mathtutor.utils.logging import get_logger

logger = get_logger(__name__)

PROBLEM_FIELDS = ("statement", "solution", "explanation")

INVALID_PROBLEM_FORMAT = "Invalid problem format"
NOT_AVAILABLE = "N/A"
SYSTEM_GENERATION_ERROR = "The system could not generate a valid problem."

_PROBLEM_TEMPLATE = '{{"statement": "{statement}", "solution": "{solution}", "explanation": "{explanation}"}}'

INVALID_PROBLEM_JSON = _PROBLEM_TEMPLATE.format(
    statement=INVALID_PROBLEM_FORMAT,
    solution=NOT_AVAILABLE,
    explanation=SYSTEM_GENERATION_ERROR,
)

_FENCE_RE = re.compile(r"```(?:json|js|javascript)?[ \t]*\n?", re.IGNORECASE)

_MISSING = object()


def _relax(text: str) -> str:
    """Drop // and /* */ comments and trailing commas that sit outside string literals."""
    out: list[str] = []
    i = 0
    length = len(text)
    in_string = False
    escape_next = False

    while i < length:
        char = text[i]

        if in_string:
            out.append(char)
            if escape_next:
                escape_next = False
            elif char == "\\":
                escape_next = True
            elif char == '"':
                in_string = False
            i += 1
            continue

        if char == '"':
            in_string = True
            out.append(char)
            i += 1
            continue

        if text.startswith("//", i):
            newline = text.find("\n", i)
            i = length if newline == -1 else newline
            continue

        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = length if end == -1 else end + 2
            continue

        if char == ",":
            j = i + 1
            while j < length and text[j].isspace():
                j += 1
            if j < length and text[j] in "}]":
                i += 1
                continue

        out.append(char)
        i += 1

    return "".join(out)


def loads_permissive(text: str) -> Any:
    """
    Parse JSON, tolerating comments and trailing commas.

    Raises:
        ValueError: If the text cannot be parsed even after relaxation
    """
    if not isinstance(text, str) or not text.strip():
        raise ValueError("Empty or non-string JSON input")

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    try:
        return json.loads(_relax(text))
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed JSON: {e.msg} at position {e.pos}") from e


def is_well_formed(text: str) -> bool:
    """Return True if text parses under the permissive grammar."""
    try:
        loads_permissive(text)
        return True
    except ValueError:
        return False


def get_property(obj: Any, name: str, default: Any = None) -> Any:
    """Case-insensitive property lookup on a parsed JSON object."""
    if not isinstance(obj, dict):
        return default
    if name in obj:
        return obj[name]
    lowered = name.lower()
    for key, value in obj.items():
        if isinstance(key, str) and key.lower() == lowered:
            return value
    return default


def has_properties(text: str, *names: str) -> bool:
    """Return True if text is a well-formed object carrying every named property."""
    try:
        data = loads_permissive(text)
    except ValueError:
        return False
    if not isinstance(data, dict):
        return False
    return all(get_property(data, name, _MISSING) is not _MISSING for name in names)


def escape_for_embedding(value: str) -> str:
    """Escape a string so it can be spliced between the quotes of a JSON string literal."""
    if not value:
        return ""
    return json.dumps(value, ensure_ascii=False)[1:-1]


def as_text(value: Any) -> str:
    """Coerce a parsed JSON scalar to text; anything that is not a string or number becomes ''."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def reconstruct(text: str) -> str:
    """
    Rebuild the canonical statement/solution/explanation object from partial JSON.

    Missing or non-text fields become empty strings. Input that cannot be
    parsed as an object yields the fixed invalid-problem sentinel.
    """
    try:
        data = loads_permissive(text)
    except ValueError:
        logger.warning("Cannot reconstruct problem JSON: input is not parseable")
        return INVALID_PROBLEM_JSON

    if not isinstance(data, dict):
        logger.warning(f"Cannot reconstruct problem JSON: expected object, got {type(data).__name__}")
        return INVALID_PROBLEM_JSON

    fields = {name: escape_for_embedding(as_text(get_property(data, name))) for name in PROBLEM_FIELDS}
    return _PROBLEM_TEMPLATE.format(**fields)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences around a payload."""
    cleaned = _FENCE_RE.sub("", text)
    return cleaned.strip(" `\n\r\t")


def _balanced_object_end(text: str, start: int) -> Optional[int]:
    """Index just past the object opening at ``start``, or None when it never closes."""
    depth = 0
    in_string = False
    escape_next = False

    for i in range(start, len(text)):
        char = text[i]

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
                return i + 1

    return None


def extract_json_object(text: str) -> str:
    """
    Return the most plausible JSON object embedded in text.

    Tries, in order: the text itself, the text without code fences, each
    balanced ``{...}`` slice, and the span from the first ``{`` to the last
    ``}``. When nothing parses, the fence-stripped text is returned so the
    caller's own validation decides what to do with it.
    """
    if not text:
        return ""

    stripped = text.strip()
    if stripped.startswith("{") and is_well_formed(stripped):
        return stripped

    cleaned = strip_code_fences(stripped)
    if cleaned.startswith("{") and is_well_formed(cleaned):
        return cleaned

    start = cleaned.find("{")
    while start != -1:
        end = _balanced_object_end(cleaned, start)
        if end is not None:
            candidate = cleaned[start:end]
            if is_well_formed(candidate):
                return candidate
        start = cleaned.find("{", start + 1)

    first, last = cleaned.find("{"), cleaned.rfind("}")
    if first != -1 and last > first:
        return cleaned[first:last + 1]

    return cleaned


__all__ = [
    "INVALID_PROBLEM_JSON",
    "PROBLEM_FIELDS",
    "as_text",
    "escape_for_embedding",
    "extract_json_object",
    "get_property",
    "has_properties",
    "is_well_formed",
    "loads_permissive",
    "reconstruct",
    "strip_code_fences",
]
