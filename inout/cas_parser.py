# inout/cas_parser.py
"""
Parser for TELEMAC steering files (.cas).

Grammar handled here:
  * one ``NAME = VALUE`` per logical line, NAME being everything before the
    first '=';
  * '/' starts a comment (whole line, or end of line outside quotes);
  * a value stays open while a quoted string is unterminated or the physical
    line ends with the list delimiter ';';
  * lines starting with '&' are solver directives and are skipped.
"""
import re
from os import PathLike
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from core.exceptions import ParseError, SteeringTypeError
from core.steering import Scalar, SteeringParameterSet, Value, normalize_key
from utils.logging_config import get_logger

logger = get_logger(__name__)

COMMENT = "/"
DIRECTIVE = "&"
LIST_DELIMITER = ";"
QUOTES = ("'", '"')
PATH_SEPARATORS = ("/", "\\")

BOOLEAN_TOKENS: Dict[str, bool] = {
    "YES": True, "TRUE": True, "OUI": True, "VRAI": True,
    "NO": False, "FALSE": False, "NON": False, "FAUX": False,
}

_INT_RE = re.compile(r"^[+-]?\d+$")
# Fortran double-precision exponents (1.D-6) are accepted as reals.
_REAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eEdD][+-]?\d+)?$")
_FORTRAN_EXPONENT = str.maketrans("dD", "eE")


def parse_scalar(token: str) -> Scalar:
    """Type a single token: integer, real, boolean token, else string."""
    token = token.strip()
    if _INT_RE.match(token):
        return int(token)
    if _REAL_RE.match(token):
        return float(token.translate(_FORTRAN_EXPONENT))
    flag = BOOLEAN_TOKENS.get(token.upper())
    if flag is not None:
        return flag
    if len(token) >= 2 and token[0] in QUOTES and token[-1] == token[0]:
        quote = token[0]
        return token[1:-1].replace(quote * 2, quote)
    return token


def _split_list(text: str) -> list:
    parts = []
    quote = None
    start = 0
    for i, ch in enumerate(text):
        if quote:
            if ch == quote:
                quote = None
        elif ch in QUOTES:
            quote = ch
        elif ch == LIST_DELIMITER:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return parts


def parse_value(text: str) -> Value:
    """Type a complete value; ';' outside quotes yields a tuple."""
    elements = _split_list(text)
    if len(elements) == 1:
        return parse_scalar(elements[0])
    return tuple(parse_scalar(element) for element in elements)


def _open_quote(text: str, quote: Optional[str] = None) -> Optional[str]:
    """Return the quote character still open at the end of ``text``."""
    # A doubled quote closes and reopens, so toggling tracks escapes too.
    for ch in text:
        if quote:
            if ch == quote:
                quote = None
        elif ch in QUOTES:
            quote = ch
    return quote


def _is_path_token(token: str, leading: bool = False) -> bool:
    """
    A token opening with '/' is a path when another separator follows, or
    when it leads the value and is more than a bare '/' or '//'.
    """
    if len(token) < 2 or token[1] in PATH_SEPARATORS:
        return False
    return leading or any(sep in token[2:] for sep in PATH_SEPARATORS)


def _strip_comment(text: str, line_number: int, quote: Optional[str] = None,
                   value_start: bool = False) -> str:
    """
    Cut ``text`` at the first comment marker outside quotes.

    A '/' counts as a comment marker at the start of the text or after a
    blank. A token such as ``/home/user/geo.slf`` is a path and is kept, and
    so is a single-separator ``/results.slf`` when it is the first token of
    the value (``value_start``). A blank-led ``/word`` later in the value is
    ambiguous and is taken as a comment with a warning.
    """
    first = len(text) - len(text.lstrip()) if value_start else None
    for i, ch in enumerate(text):
        if quote:
            if ch == quote:
                quote = None
            continue
        if ch in QUOTES:
            quote = ch
            continue
        if ch != COMMENT or (i > 0 and not text[i - 1].isspace()):
            continue
        token = text[i:].split(None, 1)[0]
        if _is_path_token(token, leading=i == first):
            continue
        if len(token) > 1 and token[1] != COMMENT:
            logger.warning("line %d: '%s' read as the start of a comment.", line_number, token)
        return text[:i]
    return text


def _is_open(value: str) -> bool:
    return _open_quote(value) is not None or value.rstrip().endswith(LIST_DELIMITER)


def parse_steering_text(text: str, source_file: Optional[Union[str, PathLike]] = None) -> SteeringParameterSet:
    """
    Parse steering-file text into a SteeringParameterSet.

    Args:
        text: Steering-file content.
        source_file: Path recorded as the set's ``source_file``.

    Returns:
        The parameters in file order. Duplicate names keep the last value and
        are logged as warnings.

    Raises:
        ParseError: On a line without '=' or a value left open at the end.
    """
    data: Dict[str, Value] = {}
    current: Optional[Tuple[str, int, str]] = None
    value = ""

    def finish(name: str, start: int, text: str) -> None:
        if name in data:
            logger.warning("line %d: duplicate steering parameter '%s'; the last value wins.", start, name)
        data[name] = parse_value(text.strip())

    for line_number, raw in enumerate(text.splitlines(), start=1):
        if current is None:
            stripped = raw.strip()
            if not stripped or stripped.startswith(COMMENT):
                continue
            if stripped.startswith(DIRECTIVE):
                logger.debug("line %d: skipping directive '%s'.", line_number, stripped)
                continue
            # Quote and comment scanning start after the first '='.
            name, sep, value = raw.partition("=")
            if not sep:
                raise ParseError("missing '=' between parameter name and value", line_number, raw)
            try:
                name = normalize_key(name)
            except SteeringTypeError as e:
                raise ParseError(f"invalid parameter name: {e}", line_number, raw) from e
            current = (name, line_number, raw)
            value = _strip_comment(value, line_number, value_start=True).lstrip()
        else:
            quote = _open_quote(value)
            if quote:
                value += _strip_comment(raw, line_number, quote=quote)
            else:
                value += _strip_comment(raw, line_number, value_start=True).strip()

        if _open_quote(value) is None:
            value = value.rstrip()
        if not _is_open(value):
            finish(current[0], current[1], value)
            current = None

    if current is not None:
        raise ParseError(f"value of '{current[0]}' is not terminated", current[1], current[2])

    return SteeringParameterSet(data, source_file=source_file)


def read_steering_file(path: Union[str, PathLike]) -> SteeringParameterSet:
    """
    Read and parse a steering file; ``source_file`` is set to ``path``.

    Raises:
        ParseError: If the content is malformed (message includes the path).
        OSError: If the file cannot be read.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    try:
        steering = parse_steering_text(text, source_file=str(path))
    except ParseError as e:
        raise ParseError(f"{path}: {e.message}", e.line_number, e.line) from e
    logger.debug("Read %d steering parameters from %s", len(steering), path)
    return steering
