"""
Google Sheets REST API client
"""
import httpx
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union
from urllib.parse import quote

from partner_dashboard.core.config import SheetsConfig, settings
from partner_dashboard.utils.exceptions import ConfigurationError, SheetsAPIError
from partner_dashboard.utils.helpers import cell_to_str, pad_matrix
from partner_dashboard.utils.logging import get_logger

logger = get_logger(__name__)

CellValue = Union[str, int, float, None]


class SheetsClient:
    """
    Client for the partner workbook on the Google Sheets v4 API.

    One instance is created per process and shares a single
    ``httpx.AsyncClient``; call ``aclose`` on shutdown.
    """

    def __init__(
        self,
        config: Optional[SheetsConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or settings.sheets
        self.base_url = self.config.base_url.rstrip("/")
        self.http_client = http_client or httpx.AsyncClient(timeout=self.config.timeout)

    async def aclose(self) -> None:
        await self.http_client.aclose()

    @property
    def spreadsheet_url(self) -> str:
        if not self.config.spreadsheet_id:
            raise ConfigurationError("Spreadsheet id is not configured (sheets.spreadsheet_id)")
        return f"{self.base_url}/spreadsheets/{self.config.spreadsheet_id}"

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.config.access_token:
            headers["Authorization"] = f"Bearer {self.config.access_token}"
        return headers

    def _get_params(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        request_params = dict(params or {})
        if self.config.api_key and not self.config.access_token:
            request_params["key"] = self.config.api_key
        return request_params

    async def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Send one request and decode the JSON body.

        Raises:
            SheetsAPIError: On an error status or a transport failure
        """
        try:
            logger.debug(f"[cyan]Sheets {method}[/cyan] {url}")
            response = await self.http_client.request(
                method,
                url,
                params=self._get_params(params),
                json=json,
                headers=self._get_headers(),
            )
            response.raise_for_status()
            return response.json() if response.content else {}
        except httpx.HTTPStatusError as e:
            logger.error(
                f"[red]❌ Sheets API error:[/red] "
                f"[yellow]{e.response.status_code}[/yellow] - {e.response.text}"
            )
            raise SheetsAPIError(f"Spreadsheet request failed with status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"[red]❌ HTTP error calling Sheets API:[/red] {str(e)}")
            raise SheetsAPIError(f"Spreadsheet request failed: {str(e)}") from e
        except ValueError as e:
            logger.error(f"[red]❌ Unreadable Sheets API response:[/red] {str(e)}")
            raise SheetsAPIError("Spreadsheet response could not be decoded") from e

    def _values_url(self, a1_range: str, suffix: str = "") -> str:
        return f"{self.spreadsheet_url}/values/{quote(a1_range, safe='!:')}{suffix}"

    async def fetch_table(self, name: str, range: Optional[str] = None) -> List[List[str]]:
        """
        Fetch a named table as header row plus data rows.

        Args:
            name: Sheet (tab) title
            range: Optional A1 range within the sheet, e.g. "A:R"

        Returns:
            Rectangular matrix of strings, empty when the sheet is empty
        """
        a1_range = f"{name}!{range}" if range else name
        payload = await self._request(
            "GET",
            self._values_url(a1_range),
            params={
                "valueRenderOption": "UNFORMATTED_VALUE",
                "dateTimeRenderOption": "FORMATTED_STRING",
            },
        )
        values = payload.get("values") or []
        logger.debug(f"Fetched {len(values)} rows from [cyan]{name}[/cyan]")
        return pad_matrix(values)

    async def get_header_row(self, name: str) -> List[str]:
        payload = await self._request("GET", self._values_url(f"{name}!1:1"))
        values = payload.get("values") or []
        return [cell_to_str(cell) for cell in values[0]] if values else []

    async def append_rows(self, range: str, rows: Iterable[Sequence[CellValue]]) -> Dict[str, Any]:
        """
        Append rows below the table found at ``range``.

        Values are interpreted as if typed by a user, so dates and numbers
        keep their sheet formatting.
        """
        body = {"values": [["" if value is None else value for value in row] for row in rows]}
        result = await self._request(
            "POST",
            self._values_url(range, ":append"),
            params={"valueInputOption": "USER_ENTERED", "insertDataOption": "INSERT_ROWS"},
            json=body,
        )
        logger.info(f"[green]✅ Appended {len(body['values'])} row(s) to[/green] [cyan]{range}[/cyan]")
        return result

    async def get_sheet_id(self, name: str) -> int:
        """Numeric id of the sheet titled ``name``"""
        payload = await self._request(
            "GET", self.spreadsheet_url, params={"fields": "sheets.properties"}
        )
        for sheet in payload.get("sheets", []):
            properties = sheet.get("properties", {})
            if properties.get("title") == name:
                return properties["sheetId"]
        raise SheetsAPIError(f"Sheet '{name}' not found in spreadsheet")

    async def delete_rows(self, name: str, row_indices: Iterable[int]) -> int:
        """
        Delete rows by their 1-based sheet index.

        Rows are removed bottom-up in one batch so earlier deletions do not
        shift the indexes of later ones.

        Returns:
            Number of rows deleted
        """
        indices = sorted({index for index in row_indices if index >= 1}, reverse=True)
        if not indices:
            return 0

        sheet_id = await self.get_sheet_id(name)
        requests = [
            {
                "deleteDimension": {
                    "range": {
                        "sheetId": sheet_id,
                        "dimension": "ROWS",
                        "startIndex": index - 1,
                        "endIndex": index,
                    }
                }
            }
            for index in indices
        ]
        await self._request("POST", f"{self.spreadsheet_url}:batchUpdate", json={"requests": requests})
        logger.info(f"[green]✅ Deleted {len(indices)} row(s) from[/green] [cyan]{name}[/cyan]")
        return len(indices)
