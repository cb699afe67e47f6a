"""Unit tests for the inventory sheet client."""
import httpx
import pytest

from stockchat.sheet import SheetClient, SheetFetchError, export_url

SHEET_ID = "1AbCdEf"


def _sheet(handler, **kwargs) -> SheetClient:
    return SheetClient(SHEET_ID, transport=httpx.MockTransport(handler), **kwargs)


class TestExportUrl:
    """Tests for export_url."""

    def test_default_tab(self):
        """Test the CSV export URL of the first tab."""
        assert export_url(SHEET_ID) == (
            "https://docs.google.com/spreadsheets/d/1AbCdEf/export?format=csv&gid=0"
        )

    def test_specific_tab(self):
        """Test a non-default tab id."""
        assert export_url(SHEET_ID, 42).endswith("&gid=42")


class TestSheetClient:
    """Tests for SheetClient over a mock transport."""

    def test_sheet_id_required(self):
        """Test that an empty sheet id is rejected."""
        with pytest.raises(ValueError):
            SheetClient("")

    @pytest.mark.asyncio
    async def test_fetch_rows(self):
        """Test downloading and parsing the sheet."""
        seen = []
        messages = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, text='sku,name,qty\n"A-1","Apples, red",12\nB-2,Bananas,0\n')

        async with _sheet(handler, gid=3) as sheet:
            sheet.set_debug_callback(lambda *args: messages.append(args))
            rows = await sheet.fetch_rows()

        assert seen == [export_url(SHEET_ID, 3)]
        assert rows == [
            {"sku": "A-1", "name": "Apples, red", "qty": "12"},
            {"sku": "B-2", "name": "Bananas", "qty": "0"},
        ]
        assert any("Loaded 2 sheet rows" in message for _, _, message in messages)

    @pytest.mark.asyncio
    async def test_follows_redirects(self):
        """Test that the export redirect to the content host is followed."""
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "docs.google.com":
                return httpx.Response(307, headers={"Location": "https://content.example.com/sheet.csv"})
            return httpx.Response(200, text="sku\nA-1\n")

        async with _sheet(handler) as sheet:
            assert await sheet.fetch_rows() == [{"sku": "A-1"}]

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        """Test that a non-success status raises SheetFetchError."""
        async with _sheet(lambda request: httpx.Response(404)) as sheet:
            with pytest.raises(SheetFetchError, match="HTTP 404") as info:
                await sheet.fetch_rows()

        assert info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_network_failure(self):
        """Test that a transport failure raises SheetFetchError."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("no route to host")

        async with _sheet(handler) as sheet:
            with pytest.raises(SheetFetchError) as info:
                await sheet.fetch_text()

        assert info.value.status_code is None
