"""Tolerant CSV-like tokenizer for bank exports."""
import re
from typing import List

_LINE_BREAK = re.compile(r"\r?\n")

QUOTE = '"'


def guess_delimiter(line: str) -> str:
    """Semicolon on a strict majority over commas, otherwise comma."""
    return ";" if line.count(";") > line.count(",") else ","


def split_line(line: str, delimiter: str) -> List[str]:
    """
    Split one line into fields.

    A quote toggles the in-quotes state and is dropped from the output;
    delimiters inside quotes are kept as text.
    """
    fields = []
    current = []
    quoted = False

    for ch in line:
        if ch == QUOTE:
            quoted = not quoted
            continue
        if ch == delimiter and not quoted:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(ch)

    fields.append("".join(current).strip())
    return fields


def parse_delimited(text: str) -> List[List[str]]:
    """
    Parse delimited text into rows of fields.

    Args:
        text: Raw file content

    Returns:
        Rows (header included), empty when the text has no non-blank lines
    """
    lines = [line for line in _LINE_BREAK.split(text or "") if line.strip()]
    if not lines:
        return []

    delimiter = guess_delimiter(lines[0])
    return [split_line(line, delimiter) for line in lines]
