# core/presentation.py
from itertools import islice
from typing import Optional, TextIO

from inout.cas_writer import render_value


def format_steering(steering, n: int = 10) -> str:
    """
    Render up to ``n`` parameters as ``KEY = VALUE`` lines followed by a
    summary line. With ``n <= 0`` only the summary line is returned.
    """
    shown = min(max(n, 0), len(steering))
    lines = [f"{key} = {render_value(value)}" for key, value in islice(steering.items(), shown)]
    summary = f"# {len(steering)} steering parameter(s), {len(steering) - shown} not shown"
    if steering.source_file:
        summary += f", source file: {steering.source_file}"
    lines.append(summary)
    return "\n".join(lines)


def print_steering(steering, n: int = 10, file: Optional[TextIO] = None) -> None:
    print(format_steering(steering, n), file=file)
