from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from data.models.game_type import GameType
from data.models.stream_session import StreamSession
from data.repositories.stream_session import StreamSessionRepository
from integrations.google.sheets.contracts.index import Index
from integrations.google.sheets.contracts.tables.col_row_table import ColRowTable
from integrations.google.sheets.contracts.tables.insertable_table import InsertableTable
from integrations.google.sheets.contracts.tables.updatable_table import UpdatableTable
from integrations.google.sheets.indexes.unique_index import UniqueIndex

if TYPE_CHECKING:
    from integrations.google.sheets.contracts.database import Database

SessionKey = tuple[str, str]


# One row per game and player - the row is overwritten when a new stream starts
@dataclass(frozen=True)
class SessionRow:
    player: str
    session: StreamSession

    @property
    def key(self) -> SessionKey:
        return self.session.game_type.value, self.player


class StreamSessionsTable(
    ColRowTable[SessionRow],
    InsertableTable[SessionRow, dict[str, str]],
    UpdatableTable[SessionRow, SessionKey, dict[str, str]],
    StreamSessionRepository,
):
    def __init__(self, database: 'Database', sheet_name: str):
        super().__init__(database, sheet_name)

        self._by_key = UniqueIndex[SessionRow, SessionKey](lambda row: row.key, self._lock)

    def get(self, game_type: GameType, player: str) -> Optional[StreamSession]:
        row = self._by_key.get((game_type.value, player))
        return row.session if row else None

    def save(self, game_type: GameType, player: str, session: StreamSession) -> None:
        if session.game_type != game_type:
            raise ValueError(f"Cannot save a {session.game_type.value} session as a {game_type.value} session")

        row = SessionRow(player=player, session=session)

        if self._by_key.get(row.key):
            self.update(row)
        else:
            self.insert(row)

    def _get_indexes(self) -> dict[str, Index]:
        return {'key': self._by_key}

    def _get_key_index(self) -> Index:
        return self._by_key

    def _get_key_names(self) -> tuple[str, ...]:
        return 'game_type', 'player'

    def _get_key(self, model: SessionRow) -> SessionKey:
        return model.key

    def _serialize(self, model: SessionRow) -> dict[str, str]:
        session = model.session

        return {
            'game_type': session.game_type.value,
            'player': model.player,
            'stream_start': self._database.to_datetime_string(session.stream_start),
            'starting_lp': StreamSessionsTable._format_optional_int(session.starting_lp),
            'starting_lp_approximate': 'TRUE' if session.starting_lp_approximate else 'FALSE',
            'wins': str(session.wins),
            'losses': str(session.losses),
            # Blank means unknown, which is not the same as 0
            'lp_change': StreamSessionsTable._format_optional_int(session.lp_change),
        }

    def _deserialize(self, row: dict[str, str]) -> Optional[SessionRow]:
        try:
            game_type = GameType(row.get('game_type', '').strip())
        except ValueError:
            return None

        player = row.get('player', '').strip()
        if not player:
            return None

        stream_start = self._database.from_datetime_string(row.get('stream_start', ''))
        if not stream_start:
            return None

        return SessionRow(
            player=player,
            session=StreamSession(
                game_type=game_type,
                stream_start=stream_start,
                starting_lp=ColRowTable._parse_int(row.get('starting_lp', '')),
                starting_lp_approximate=row.get('starting_lp_approximate', '').strip().upper() == 'TRUE',
                wins=ColRowTable._parse_int(row.get('wins', '')) or 0,
                losses=ColRowTable._parse_int(row.get('losses', '')) or 0,
                lp_change=ColRowTable._parse_int(row.get('lp_change', '')),
            ),
        )

    @staticmethod
    def _format_optional_int(value: Optional[int]) -> str:
        return '' if value is None else str(value)
