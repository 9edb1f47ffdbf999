"""Quoted delimited-text reader and writer.

The reader walks the whole input character by character so that
delimiters, quotes and line breaks inside a quoted span stay part of the
field. An unterminated quote keeps the remainder of the input quoted.
"""

import csv
import io
from typing import Iterable, List, Optional, Sequence, Union

from lingohub_api.errors import StructuralError

QUOTE = '"'


def decode_upload(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise StructuralError("File is not valid UTF-8 text") from exc


def parse_csv(text: str, delimiter: str = ",") -> List[List[str]]:
    rows: List[List[str]] = []
    fields: List[str] = []
    field: List[str] = []
    raw_has_content = False
    in_quotes = False

    def end_row() -> None:
        nonlocal fields, field, raw_has_content
        fields.append("".join(field))
        # Blank lines carry no data rows
        if raw_has_content:
            rows.append(fields)
        fields = []
        field = []
        raw_has_content = False

    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if in_quotes:
            raw_has_content = True
            if char == QUOTE:
                if i + 1 < length and text[i + 1] == QUOTE:
                    field.append(QUOTE)
                    i += 1
                else:
                    in_quotes = False
            else:
                field.append(char)
        elif char == QUOTE:
            in_quotes = True
            raw_has_content = True
        elif char == delimiter:
            fields.append("".join(field))
            field = []
            raw_has_content = True
        elif char == "\n":
            end_row()
        elif char == "\r" and i + 1 < length and text[i + 1] == "\n":
            end_row()
            i += 1
        else:
            field.append(char)
            if not char.isspace():
                raw_has_content = True
        i += 1

    if field or fields or raw_has_content:
        end_row()
    return rows


def write_csv(rows: Iterable[Sequence[Optional[Union[str, int]]]], delimiter: str = ",") -> str:
    """Rows joined by newlines with minimal quoting and no trailing line break."""
    stream = io.StringIO()
    writer = csv.writer(stream, delimiter=delimiter, lineterminator="\n")
    writer.writerows(rows)
    return stream.getvalue().removesuffix("\n")
