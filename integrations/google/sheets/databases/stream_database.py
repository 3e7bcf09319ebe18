import pytz

from integrations.google.api import GoogleApi
from integrations.google.sheets.contracts.database import Database
from integrations.google.sheets.tables.captured_lp import CapturedLpTable
from integrations.google.sheets.tables.stream_sessions import StreamSessionsTable


class StreamDatabase(Database):
    def __init__(self, api: GoogleApi, spreadsheet_key: str, timezone: pytz.timezone):
        super().__init__(api, spreadsheet_key, timezone)

        self._sessions = StreamSessionsTable(self, 'Sessions')
        self._captured_lp = CapturedLpTable(self, 'Captured LP')

        self.refresh()

    @property
    def sessions(self) -> StreamSessionsTable:
        return self._sessions

    @property
    def captured_lp(self) -> CapturedLpTable:
        return self._captured_lp
