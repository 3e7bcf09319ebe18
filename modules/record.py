import logging
from typing import Optional

from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes

from data.models.rank_snapshot import RankSnapshot
from data.models.streamer import Streamer
from data.repositories.exceptions import StoreUnavailableError
from helpers.access_checker import AccessChecker
from helpers.business_logic.exceptions import MalformedMatchDataError
from helpers.business_logic.record.stream_tracker import StreamTracker
from helpers.telegram.exceptions import UserFriendlyError, CommandSyntaxError, NotAllowedError
from integrations.exceptions import AccountNotFoundError, UpstreamUnavailableError
from integrations.twitch.api import TwitchApi
from messages.stream_record import format_stream_record, format_offline_record

from modules.base_module import BaseModule

logger = logging.getLogger(__name__)

HELP_TEXT = """🎮 Stream Record

Type /record to see how the ranked games are going this stream - wins, losses and the LP gained or lost since the stream started.

When the stream is offline, you get the record of the last stream instead.

Bot masters can also set the starting rank by hand, e.g.

/record gold 2 50
/record master 120"""


class RecordModule(BaseModule):
    def __init__(self, tracker: StreamTracker, twitch: TwitchApi, streamer: Streamer, ac: AccessChecker, capture_interval: int = 120):
        self._tracker = tracker
        self._twitch = twitch
        self._streamer = streamer
        self._ac = ac
        self._capture_interval = capture_interval

    def install(self, application: Application) -> None:
        application.add_handlers([
            CommandHandler("record", self._record),
        ])

        # Catch the starting LP as soon as the stream goes live, before anyone asks for the record
        application.job_queue.run_repeating(callback=self._capture_starting_lp, interval=self._capture_interval, first=0)

        logger.info("Record module installed")

    async def _record(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        try:
            start_lp_override = self._validate_override(update, context.args)

            stream_start = await self._twitch.get_stream_start(self._streamer.twitch_channel)
            if stream_start:
                record = await self._tracker.track_online(
                    summoner=self._streamer.summoner,
                    tag=self._streamer.tag,
                    region=self._streamer.region,
                    stream_start=stream_start,
                    start_lp_override=start_lp_override,
                )
                reply = format_stream_record(record)
            else:
                reply = format_offline_record(self._tracker.track_offline(self._streamer.summoner, self._streamer.tag))
        except CommandSyntaxError:
            reply = HELP_TEXT
        except UserFriendlyError as e:
            reply = str(e)
        except AccountNotFoundError:
            reply = f"I couldn't find the account {self._streamer.riot_id}. Has the Riot ID changed?"
        except UpstreamUnavailableError:
            reply = "Riot or Twitch are not answering right now. Please try again in a minute."
        except StoreUnavailableError:
            reply = "I couldn't save the stream record right now. Please try again in a minute."
        except MalformedMatchDataError as e:
            logger.warning(e)
            reply = "One of the games this stream came back without a result, so I can't count the record yet. Please try again later."
        except Exception as e:
            logger.exception(e)
            reply = f"BeeDeeBeeBoop 🤖 Error : {e}"

        await update.message.reply_text(reply, do_quote=False)

    async def _capture_starting_lp(self, context: ContextTypes.DEFAULT_TYPE) -> None:
        try:
            stream_start = await self._twitch.get_stream_start(self._streamer.twitch_channel)
            if not stream_start:
                return

            await self._tracker.capture_starting_lp(
                summoner=self._streamer.summoner,
                tag=self._streamer.tag,
                region=self._streamer.region,
                stream_start=stream_start,
            )
        except Exception as e:
            logger.exception(e)

    def _validate_override(self, update: Update, args: list[str]) -> Optional[int]:
        if not args:
            return None

        if not self._ac.is_master(update.effective_user.username):
            raise NotAllowedError()

        # The override is given as a rank, so it can be compared with the ladder points of the current rank
        try:
            starting_rank = RankSnapshot.parse(args)
        except ValueError as error:
            raise CommandSyntaxError() from error

        return starting_rank.ladder_points
