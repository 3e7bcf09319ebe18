import logging
import re
import gspread
from abc import abstractmethod
from typing import TypeVar, Optional

from gspread.utils import ValueInputOption

from data.repositories.exceptions import StoreUnavailableError
from integrations.google.sheets.contracts.tables.readable_table import ReadableTable

logger = logging.getLogger(__name__)

T = TypeVar("T")

# This is a standard table format, with the top row being the header and the following rows being the data
# After extending this class you will have to implement the deserialization method
# Also, this class implements some of the methods necessary for Insertable and Updatable
# Write failures are raised as StoreUnavailableError, the callers decide what a failed write means
class ColRowTable(ReadableTable[T]):
    # Raw input keeps the values exactly as we wrote them, instead of letting Sheets reformat dates and numbers
    _value_input_option = ValueInputOption.raw

    def _parse(self, raw: list[list[str]]) -> list[T]:
        if not raw:
            raise ValueError(f"The sheet {self._sheet_name} does not have a header row")

        header = raw[0]
        rows = raw[1:]

        keys = [ColRowTable._header_to_key(h) for h in header]
        serialized = [dict(zip(keys, row)) for row in rows]
        deserialized = [self._deserialize(row) for row in serialized]
        return [model for model in deserialized if model]

    def _insert_rows(self, rows: list[dict[str, str]]) -> None:
        if not rows:
            return

        try:
            # Load the data from Google
            worksheet = self._load_worksheet(self._database.load())
            header = self._load_values(worksheet)[0]
            columns = ColRowTable._resolve_columns(header)

            # Map the row values to their column numbers, then flatten them, filling any gaps with blank strings
            to_append = [ColRowTable._fill_gaps({columns[k]: v for k, v in row.items() if k in columns}) for row in rows]

            worksheet.append_rows(to_append, value_input_option=self._value_input_option)
        except Exception as e:
            logger.exception(e)
            raise StoreUnavailableError(f"Could not insert rows into {self._sheet_name}") from e

    def _update_rows(self, rows: dict[tuple, dict[str, str]], key_names: tuple[str, ...]) -> None:
        if not rows:
            return

        try:
            # Load the data from Google
            worksheet = self._load_worksheet(self._database.load())
            raw = self._load_values(worksheet)

            header = raw[0]
            existing_rows = raw[1:]
            columns = ColRowTable._resolve_columns(header)

            missing_keys = [name for name in key_names if name not in columns]
            if missing_keys:
                raise ValueError(f"The sheet {self._sheet_name} is missing the key columns {missing_keys}")

            # Index the rows by the values in the key columns
            key_columns = [columns[name] for name in key_names]
            existing_row_number_by_key = {
                tuple(ColRowTable._cell(row, column).strip() for column in key_columns): i
                for i, row in enumerate(existing_rows)
            }

            # A row deleted by hand must not look like a successful save
            missing_rows = [key for key in rows if tuple(str(part) for part in key) not in existing_row_number_by_key]
            if missing_rows:
                raise ValueError(f"The sheet {self._sheet_name} has no rows for {missing_rows}")

            to_update = []
            for key, row in rows.items():
                row_number = existing_row_number_by_key[tuple(str(part) for part in key)]

                for k, v in row.items():
                    if k in columns:
                        # Coordinates start at 1 and we also have 1 row for the headers
                        to_update.append(gspread.Cell(row_number + 1 + 1, columns[k] + 1, v))

            if to_update:
                worksheet.update_cells(to_update, value_input_option=self._value_input_option)
        except Exception as e:
            logger.exception(e)
            raise StoreUnavailableError(f"Could not update rows in {self._sheet_name}") from e

    @staticmethod
    def _fill_gaps(data_by_column: dict[int, str], filler: str = '') -> list[str]:
        if not data_by_column:
            return []

        return [data_by_column.get(i, filler) for i in range(max(data_by_column) + 1)]

    @staticmethod
    def _cell(row: list[str], column: int) -> str:
        # Trailing empty cells are not returned by the API
        return row[column] if column < len(row) else ''

    @staticmethod
    def _resolve_columns(header: list[str]) -> dict[str, int]:
        # Map the header keys to their column numbers - instead of A, B, C we use 0, 1, 2
        return {ColRowTable._header_to_key(h): i for i, h in enumerate(header)}

    @staticmethod
    def _header_to_key(text: str) -> str:
        text = re.sub(r"\([^)]*\)", '', text)  # Remove anything in parentheses
        text = re.sub(r"\s+", ' ', text)  # Squash multiple whitespaces together
        text = text.strip()  # Remove leading / trailing whitespace
        text = text.lower()  # Everything should be lowercase
        text = re.sub(r"[^a-z0-9_]", '_', text)  # Remove any characters except the ones used for variables

        return text

    @staticmethod
    def _parse_int(int_string: str) -> Optional[int]:
        try:
            return int(int_string.strip())
        except ValueError:
            return None

    @abstractmethod
    def _deserialize(self, row: dict[str, str]) -> Optional[T]:
        pass
