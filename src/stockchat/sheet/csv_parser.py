"""CSV ingestion for the live inventory sheet.

Hidden design decisions:
- One record per physical line; quoted fields may hold commas but not newlines
- The header row defines the columns; short rows are padded with ""
- Rows that are blank in every field are dropped
"""

from ..scanning import split_quoted

BYTE_ORDER_MARK = "\ufeff"


def parse_csv_line(line: str) -> list[str]:
    """Split one CSV line into trimmed fields."""
    return split_quoted(line, delimiter=",", quotes='"')


def parse_csv(text: str) -> list[dict[str, str]]:
    """Parse a headered CSV document into row dicts.

    Args:
        text: Full CSV document

    Returns:
        Rows keyed by header, in document order; empty if there is no data row
    """
    records = [parse_csv_line(line) for line in text.split("\n")]
    if len(records) < 2:
        return []

    headers = records[0]
    if headers and headers[0].startswith(BYTE_ORDER_MARK):
        headers[0] = headers[0][len(BYTE_ORDER_MARK):].strip()

    rows = []
    for record in records[1:]:
        if not any(record):
            continue
        rows.append({
            header: record[index] if index < len(record) else ""
            for index, header in enumerate(headers)
        })
    return rows
