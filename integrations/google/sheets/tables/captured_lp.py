from datetime import datetime
from typing import Optional, TYPE_CHECKING

from data.models.captured_lp import CapturedLp
from data.repositories.captured_lp import CapturedLpRepository
from integrations.google.sheets.contracts.index import Index
from integrations.google.sheets.contracts.tables.col_row_table import ColRowTable
from integrations.google.sheets.contracts.tables.insertable_table import InsertableTable
from integrations.google.sheets.indexes.unique_index import UniqueIndex

if TYPE_CHECKING:
    from integrations.google.sheets.contracts.database import Database

CaptureKey = tuple[str, datetime]


# Written by the capture job whenever a stream goes live, read by the first record of that stream
class CapturedLpTable(
    ColRowTable[CapturedLp],
    InsertableTable[CapturedLp, dict[str, str]],
    CapturedLpRepository,
):
    def __init__(self, database: 'Database', sheet_name: str):
        super().__init__(database, sheet_name)

        self._by_key = UniqueIndex[CapturedLp, CaptureKey](lambda model: (model.player, model.stream_start), self._lock)

    def get(self, player: str, stream_start: datetime) -> Optional[CapturedLp]:
        return self._by_key.get((player, stream_start))

    def save(self, model: CapturedLp) -> None:
        # Captures are never overwritten
        if self.get(model.player, model.stream_start):
            return

        self.insert(model)

    def _get_indexes(self) -> dict[str, Index]:
        return {'key': self._by_key}

    def _serialize(self, model: CapturedLp) -> dict[str, str]:
        return {
            'player': model.player,
            'stream_start': self._database.to_datetime_string(model.stream_start),
            'lp': str(model.lp),
            'captured_at': self._database.to_datetime_string(model.captured_at),
        }

    def _deserialize(self, row: dict[str, str]) -> Optional[CapturedLp]:
        player = row.get('player', '').strip()
        if not player:
            return None

        stream_start = self._database.from_datetime_string(row.get('stream_start', ''))
        if not stream_start:
            return None

        lp = ColRowTable._parse_int(row.get('lp', ''))
        if lp is None:
            return None

        return CapturedLp(
            player=player,
            stream_start=stream_start,
            lp=lp,
            captured_at=self._database.from_datetime_string(row.get('captured_at', '')),
        )
