import logging
import os
import pytz

from telegram.ext import ApplicationBuilder
from dotenv import load_dotenv

from data.models.streamer import Streamer
from helpers.access_checker import AccessChecker
from helpers.business_logic.record.session_manager import SessionManager
from helpers.business_logic.record.stream_tracker import StreamTracker
from integrations.google.api import GoogleApi
from integrations.riot.api import RiotApi
from integrations.twitch.api import TwitchApi

from integrations.google.sheets.databases.stream_database import StreamDatabase

from modules.base_module import BaseModule
from modules.record import RecordModule

load_dotenv()

logger = logging.getLogger(__name__)


class MainConfig:
    def __init__(self):
        self.log_level = logging.getLevelName(os.getenv('log_level', 'INFO'))
        self.telegram_token = os.getenv('telegram_token')
        self.riot_api_key = os.getenv('riot_api_key')
        self.streamer = Streamer.parse(
            riot_id=os.getenv('riot_id', ''),
            region=os.getenv('riot_region', 'na1'),
            twitch_channel=os.getenv('twitch_channel', ''),
        )
        self.twitch_client_id = os.getenv('twitch_client_id')
        self.twitch_client_secret = os.getenv('twitch_client_secret')
        self.timezone = pytz.timezone(os.getenv('timezone', 'America/New_York'))
        self.masters = AccessChecker.parse_usernames(os.getenv('masters', ''))
        self.google_api_credentials = os.getenv('google_api_credentials')
        self.stream_google_spreadsheet_key = os.getenv('stream_google_spreadsheet_key')
        self.capture_interval = int(os.getenv('capture_interval', 120))
        self.refresh_interval = int(os.getenv('refresh_interval', 60 * 5))


def main() -> None:
    config = MainConfig()
    logging.basicConfig(level=config.log_level, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    google_api = GoogleApi(config.google_api_credentials)

    stream = StreamDatabase(
        api=google_api,
        spreadsheet_key=config.stream_google_spreadsheet_key,
        timezone=config.timezone,
    )

    sessions = SessionManager(sessions=stream.sessions, captured_lp=stream.captured_lp)
    tracker = StreamTracker(api=RiotApi(config.riot_api_key), sessions=sessions)
    twitch = TwitchApi(config.twitch_client_id, config.twitch_client_secret)
    ac = AccessChecker(masters=config.masters)

    modules: list[BaseModule] = [
        RecordModule(
            tracker=tracker,
            twitch=twitch,
            streamer=config.streamer,
            ac=ac,
            capture_interval=config.capture_interval,
        ),
    ]

    application = ApplicationBuilder().token(config.telegram_token).build()
    for module in modules:
        module.install(application)

    application.job_queue.run_repeating(callback=stream.refresh_job, interval=config.refresh_interval)  # Pick up manual edits to the sheet

    # Start the Bot
    logger.info(f"Tracking {config.streamer.riot_id} ({config.streamer.region}) on twitch.tv/{config.streamer.twitch_channel}")
    logger.info('start_polling')
    application.run_polling()


if __name__ == '__main__':
    main()
