from .client import SheetClient, SheetFetchError, export_url
from .csv_parser import parse_csv, parse_csv_line

__all__ = [
    "SheetClient",
    "SheetFetchError",
    "export_url",
    "parse_csv",
    "parse_csv_line",
]
