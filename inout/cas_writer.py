# inout/cas_writer.py
"""
Serializer for TELEMAC steering files (.cas).

Each parameter becomes ``KEY = VALUE``. Lines are kept within
MAX_LINE_LENGTH columns where the value allows it: lists break after a ';'
and quoted text breaks in front of a blank, which leaves the value open for
the parser. Path values are never broken.
"""
import os
from os import PathLike
from pathlib import Path
from typing import List, Optional, Union

from core.exceptions import SteeringError
from inout.cas_parser import COMMENT, LIST_DELIMITER, PATH_SEPARATORS
from utils.logging_config import get_logger

logger = get_logger(__name__)

MAX_LINE_LENGTH = 72
QUOTE = "'"


def render_scalar(value) -> str:
    if isinstance(value, bool):
        return "YES" if value else "NO"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    return QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE


def render_value(value) -> str:
    """Render a stored value on a single line, without wrapping."""
    if isinstance(value, tuple):
        return LIST_DELIMITER.join(render_scalar(v) for v in value)
    return render_scalar(value)


def is_path_like(value) -> bool:
    """A string containing a path separator and no blanks."""
    return (isinstance(value, str)
            and any(sep in value for sep in PATH_SEPARATORS)
            and not any(ch.isspace() for ch in value))


def _wrap_list(prefix: str, value: tuple) -> List[str]:
    parts = [render_scalar(v) for v in value]
    lines = []
    current = prefix + parts[0]
    for i, part in enumerate(parts[1:], start=2):
        candidate = current + LIST_DELIMITER + part
        # Every line but the last needs room for its trailing delimiter.
        limit = MAX_LINE_LENGTH if i == len(parts) else MAX_LINE_LENGTH - 1
        if len(candidate) <= limit:
            current = candidate
        else:
            lines.append(current + LIST_DELIMITER)
            current = part
    lines.append(current)
    return lines


def _text_break(text: str, room: int) -> Optional[int]:
    """
    Index of the last blank run starting within ``room`` columns whose
    following word does not begin with the comment marker.
    """
    for i in range(min(room, len(text) - 1), 0, -1):
        if not text[i].isspace() or text[i - 1].isspace():
            continue
        rest = text[i:].lstrip()
        if rest and not rest.startswith(COMMENT):
            return i
    return None


def _wrap_text(prefix: str, rendered: str) -> List[str]:
    lines = []
    current = prefix
    rest = rendered
    while len(current) + len(rest) > MAX_LINE_LENGTH:
        cut = _text_break(rest, MAX_LINE_LENGTH - len(current))
        if cut is None:
            break
        lines.append(current + rest[:cut])
        current = ""
        rest = rest[cut:]
    lines.append(current + rest)
    return lines


def render_lines(key: str, value) -> List[str]:
    """Render one parameter as one or more physical lines."""
    prefix = f"{key} = "
    rendered = render_value(value)
    if len(prefix) + len(rendered) <= MAX_LINE_LENGTH:
        return [prefix + rendered]
    if is_path_like(value):
        logger.warning("Path value of '%s' is longer than %d columns and is not split.", key, MAX_LINE_LENGTH)
        return [prefix + rendered]
    if isinstance(value, tuple):
        lines = _wrap_list(prefix, value)
    elif isinstance(value, str):
        lines = _wrap_text(prefix, rendered)
    else:
        lines = [prefix + rendered]
    if any(len(line) > MAX_LINE_LENGTH for line in lines):
        logger.warning("Steering parameter '%s' cannot be kept within %d columns.", key, MAX_LINE_LENGTH)
    return lines


def serialize_steering(steering) -> str:
    """
    Render a steering parameter set as steering-file text.

    Comments from a parsed file are not carried over.
    """
    lines: List[str] = []
    for key, value in steering.items():
        lines.extend(render_lines(key, value))
    return "".join(line + "\n" for line in lines)


def write_steering_file(steering, path: Optional[Union[str, PathLike]] = None) -> str:
    """
    Write the steering set to ``path`` (default: its ``source_file``).

    The text goes to a temporary file next to the target which is then moved
    into place, so readers never see a partially written file.

    Returns:
        The path written.

    Raises:
        SteeringError: If neither ``path`` nor ``source_file`` is set.
        OSError: If the file cannot be written.
    """
    target = path if path is not None else steering.source_file
    if target is None:
        raise SteeringError("No output path given and the steering set has no source file.")
    target = Path(target)
    text = serialize_steering(steering)
    tmp = target.with_name(target.name + ".tmp")
    try:
        with open(tmp, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, target)
    except OSError:
        if tmp.exists():
            tmp.unlink()
        raise
    logger.info("Wrote %d steering parameters to %s", len(steering), target)
    return str(target)
