"""Fetching the published inventory sheet.

Hidden design decisions:
- The export URL shape for a published Google Sheet
- Translating HTTP failures into SheetFetchError
"""

from typing import Any

import httpx

from .csv_parser import parse_csv

EXPORT_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv&gid={gid}"


class SheetFetchError(Exception):
    """The sheet export could not be downloaded."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def export_url(sheet_id: str, gid: int | str = 0) -> str:
    """Build the CSV export URL for a published sheet tab."""
    return EXPORT_URL.format(sheet_id=sheet_id, gid=gid)


class SheetClient:
    """Reads the live inventory sheet as rows.

    Usage:
        async with SheetClient(sheet_id) as sheet:
            rows = await sheet.fetch_rows()
    """

    def __init__(
        self,
        sheet_id: str,
        gid: int | str = 0,
        timeout: float = 30.0,
        **client_kwargs: Any
    ):
        if not sheet_id:
            raise ValueError("sheet_id is required")
        self._url = export_url(sheet_id, gid)
        self._client = httpx.AsyncClient(timeout=timeout, follow_redirects=True, **client_kwargs)
        self._debug_callback: Any | None = None

    @property
    def url(self) -> str:
        return self._url

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback: Callable(level, component, message)."""
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Sheet", message)

    async def fetch_text(self) -> str:
        """Download the raw CSV document.

        Raises:
            SheetFetchError: On network failure or a non-success status
        """
        self._debug("debug", f"GET {self._url}")
        try:
            response = await self._client.get(self._url)
        except httpx.HTTPError as e:
            raise SheetFetchError(f"Failed to fetch sheet: {e}") from e

        if response.is_error:
            raise SheetFetchError(
                f"Failed to fetch sheet: HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response.text

    async def fetch_rows(self) -> list[dict[str, str]]:
        """Download and parse the sheet into rows."""
        rows = parse_csv(await self.fetch_text())
        self._debug("info", f"Loaded {len(rows)} sheet rows")
        return rows

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "SheetClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
