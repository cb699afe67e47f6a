"""Quote-aware field splitting shared by the CSV ingestor and the markup scanner.

Hidden design decisions:
- A quote character toggles the "inside quoted field" state; there is no
  escaped-quote form (a doubled quote simply toggles twice)
- Delimiters inside quotes never split
- Quote characters are dropped from the field text
"""

from collections.abc import Callable


def split_quoted(
    line: str,
    delimiter: str | Callable[[str], bool] = ",",
    quotes: str = '"',
    strip: bool = True,
) -> list[str]:
    """Split a line into fields, honouring quoted sections.

    Args:
        line: Text to split (a single line; embedded newlines are ordinary characters)
        delimiter: Delimiter character, or a predicate deciding whether a character splits
        quotes: Characters that toggle the quoted state
        strip: Trim whitespace around each field

    Returns:
        List of fields, always at least one (possibly empty) field
    """
    if callable(delimiter):
        is_delimiter = delimiter
    else:
        def is_delimiter(char: str) -> bool:
            return char == delimiter

    fields: list[str] = []
    current: list[str] = []
    active_quote: str | None = None

    for char in line:
        if char in quotes and (active_quote is None or char == active_quote):
            active_quote = None if active_quote else char
        elif active_quote is None and is_delimiter(char):
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    fields.append("".join(current))

    if strip:
        return [field.strip() for field in fields]
    return fields
