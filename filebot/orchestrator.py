"""Request orchestration: one entry point per inbound event kind."""

import asyncio
import functools
from typing import Awaitable, Callable, Dict, FrozenSet, List

from common.constants import DEFAULT_DAILY_LIMIT, DEFAULT_RESULTS_PER_PAGE, SEARCH_CALLBACK_PREFIX
from common.logging_config import get_logger
from common.types import FileRecord
from filebot.delivery_client import DeliveryTransport
from filebot.exceptions import (
    DeliveryFailedError,
    DuplicateFileError,
    EmptyKeywordListError,
    InvalidSelectionError,
    UnsupportedMediaKindError,
)
from filebot.selection_cache import SelectionCache
from filebot.services.file_service import FileService
from filebot.services.quota_service import DailyQuotaTracker
from filebot.services.search_service import KeywordSearchEngine
from filebot.types import (
    Choice,
    CommandEvent,
    Reply,
    ReplyKind,
    SelectionEvent,
    TextEvent,
    UploadEvent,
)
from filebot.utils import parse_command

logger = get_logger(__name__)

MARKDOWN = "Markdown"


def parse_selection_index(data: str) -> int:
    """
    Parse a selection payload into a result index.

    Raises:
        InvalidSelectionError: Payload is not a non-negative integer
    """
    try:
        index = int(data)
    except (TypeError, ValueError):
        raise InvalidSelectionError(f"Not a result index: {data!r}")
    if index < 0:
        raise InvalidSelectionError(f"Negative result index: {index}")
    return index


class RequestOrchestrator:
    """
    Composes search, quota, selection cache and delivery into the user flows.

    Search: quota pre-check, keyword search, cache the first page, list it.
    Select: resolve the cached pick, charge the quota, deliver.
    Upload and delete are restricted to the configured admin ids.

    Storage errors are not caught here; they reach the caller as
    StorageUnavailableError.
    """

    def __init__(
        self,
        search_engine: KeywordSearchEngine,
        quota_tracker: DailyQuotaTracker,
        selection_cache: SelectionCache,
        file_service: FileService,
        delivery: DeliveryTransport,
        admin_ids: FrozenSet[str] = frozenset(),
        daily_limit: int = DEFAULT_DAILY_LIMIT,
        page_size: int = DEFAULT_RESULTS_PER_PAGE,
    ):
        self.search_engine = search_engine
        self.quota_tracker = quota_tracker
        self.selection_cache = selection_cache
        self.file_service = file_service
        self.delivery = delivery
        self.admin_ids = frozenset(str(admin_id) for admin_id in admin_ids)
        self.daily_limit = daily_limit
        self.page_size = page_size

        self._commands: Dict[str, Callable[[CommandEvent], Awaitable[Reply]]] = {
            "start": self._cmd_start,
            "help": self._cmd_help,
            "myaccount": self._cmd_account,
            "account": self._cmd_account,
            "delete": self._cmd_delete,
            "find": self._cmd_find,
        }

    def is_admin(self, user_id: str) -> bool:
        return str(user_id) in self.admin_ids

    # Entry points

    async def handle_text(self, event: TextEvent) -> Reply:
        text = (event.text or "").strip()
        if text.startswith("/"):
            name, args = parse_command(text)
            return await self.handle_command(CommandEvent(
                user_id=event.user_id,
                chat_id=event.chat_id,
                command=name,
                args=args,
                first_name=event.first_name,
            ))
        return await self.search(event.user_id, text)

    async def handle_command(self, event: CommandEvent) -> Reply:
        name = event.command.strip().lstrip("/").split("@", 1)[0].lower()
        handler = self._commands.get(name)
        if handler is None:
            logger.info(f"Unknown command /{name} [user_id={event.user_id}]")
            return Reply(ReplyKind.UNKNOWN_COMMAND, f"🤔 Unknown command /{name}. Send /help to see what I can do.")
        logger.info(f"Command /{name} [user_id={event.user_id}]")
        return await handler(event)

    async def handle_upload(self, event: UploadEvent) -> Reply:
        if not self.is_admin(event.user_id):
            logger.warning(f"Upload from non-admin ignored [user_id={event.user_id}]")
            return Reply(
                ReplyKind.FORBIDDEN,
                "🙏 Thank you for sharing, but only admins can upload files here.\n"
                "You can search and download files using keywords."
            )

        try:
            record = await self._run_blocking(
                self.file_service.add_file,
                event.file_id,
                event.media_kind,
                event.caption,
                str(event.user_id),
                event.file_name,
            )
        except EmptyKeywordListError:
            return Reply(ReplyKind.USAGE, "⚠️ Please add keywords in the caption separated by spaces or commas.")
        except UnsupportedMediaKindError as e:
            return Reply(ReplyKind.UPLOAD_REJECTED, f"⚠️ {e}. Send a document, photo, video or audio file.")
        except DuplicateFileError:
            return Reply(ReplyKind.UPLOAD_REJECTED, "⚠️ This file is already stored.", file_id=event.file_id)

        keywords = ", ".join(sorted(record.keywords))
        logger.info(f"Stored file [file_id={record.file_id}] keywords={keywords}")
        return Reply(
            ReplyKind.UPLOAD_SAVED,
            f"✅ File saved!\nFile ID: {record.file_id}\nKeywords: {keywords}",
            file_id=record.file_id,
        )

    async def handle_selection(self, event: SelectionEvent) -> Reply:
        data = (event.data or "").strip()
        if data.startswith(SEARCH_CALLBACK_PREFIX):
            query = data[len(SEARCH_CALLBACK_PREFIX):].replace("_", " ")
            return await self.search(event.user_id, query)

        try:
            index = parse_selection_index(data)
        except InvalidSelectionError as e:
            logger.warning(f"Malformed selection: {e} [user_id={event.user_id}]")
            return self._expired_reply()

        return await self.select(event.user_id, event.chat_id, index)

    # Flows

    async def search(self, user_id: str, query: str) -> Reply:
        used = await self._run_blocking(self.quota_tracker.peek, user_id)
        if used >= self.daily_limit:
            logger.info(f"Search refused, quota used {used}/{self.daily_limit} [user_id={user_id}]")
            return self._quota_exceeded_reply()

        results = await self._run_blocking(self.search_engine.search, query)
        if not results:
            return Reply(ReplyKind.NO_RESULTS, "❌ No files found.", total_matches=0)

        page = results[:self.page_size]
        self.selection_cache.put(user_id, page)

        return Reply(
            ReplyKind.RESULTS,
            f"Found {len(results)} file(s). Select one:",
            choices=[Choice(label=record.display_name, data=str(i)) for i, record in enumerate(page)],
            total_matches=len(results),
        )

    async def select(self, user_id: str, chat_id: str, index: int) -> Reply:
        lookup = self.selection_cache.lookup(user_id, index)
        if not lookup.found:
            logger.info(f"Selection {index} unavailable ({lookup.miss_reason.value}) [user_id={user_id}]")
            return self._expired_reply()

        count = await self._run_blocking(self.quota_tracker.increment_and_get, user_id)
        if count > self.daily_limit:
            logger.warning(
                f"Delivery refused after charge, count {count} > limit {self.daily_limit} [user_id={user_id}]"
            )
            return self._quota_exceeded_reply()

        record = lookup.record
        try:
            await self.delivery.deliver(chat_id, record.media_kind, record.file_id, record.delivery_caption)
        except DeliveryFailedError as e:
            logger.error(f"Error sending file [file_id={record.file_id}] [user_id={user_id}]: {e}")
            return Reply(ReplyKind.DELIVERY_FAILED, "❌ Failed to send file.", file_id=record.file_id)

        return Reply(ReplyKind.DELIVERED, f"📤 Sent {record.display_name}", file_id=record.file_id)

    # Commands

    async def _cmd_start(self, event: CommandEvent) -> Reply:
        name = event.first_name or "User"
        return Reply(
            ReplyKind.GREETING,
            f"👋 Hello *{name}*!\n\n"
            "Welcome to the File Search Bot.\n"
            "You can easily search and download files by typing keywords.\n\n"
            "📌 Here are some useful commands:\n"
            "- 🔍 Just type any keyword (e.g., `war`, `movie`) to search files\n"
            "- 🏁 /start → Restart the bot\n"
            "- 📖 /help → Show how to use this bot\n"
            "- 👤 /myaccount → Check your daily usage limit",
            suggestions=["/help", "/myaccount", "latest movie"],
            parse_mode=MARKDOWN,
        )

    async def _cmd_help(self, event: CommandEvent) -> Reply:
        return Reply(
            ReplyKind.HELP,
            "📖 *How to Use This Bot*\n\n"
            "- Type a keyword (e.g. `war`, `movie`, `action`) to search.\n"
            "- You'll see matching results and can click to download.\n"
            "- You can search with multiple words.\n\n"
            f"⚠️ *Daily Limit*: You can download up to *{self.daily_limit}* files per day. "
            "Limit resets at midnight.",
            choices=[Choice(label="🔍 Try Example: Avatar", data=f"{SEARCH_CALLBACK_PREFIX}avatar")],
            parse_mode=MARKDOWN,
        )

    async def _cmd_account(self, event: CommandEvent) -> Reply:
        today = self.quota_tracker.today().isoformat()
        used = await self._run_blocking(self.quota_tracker.peek, event.user_id)
        remaining = max(self.daily_limit - used, 0)
        return Reply(
            ReplyKind.ACCOUNT,
            "👤 *Your Account Details*\n\n"
            f"📅 Date: *{today}*\n"
            f"✅ Used: *{used}* files\n"
            f"⏳ Remaining: *{remaining}* files\n"
            f"🎯 Daily Limit: *{self.daily_limit}* files\n\n"
            "🔄 Limit resets every midnight.",
            parse_mode=MARKDOWN,
        )

    async def _cmd_delete(self, event: CommandEvent) -> Reply:
        if not self.is_admin(event.user_id):
            logger.warning(f"Delete by non-admin refused [user_id={event.user_id}]")
            return Reply(ReplyKind.FORBIDDEN, "❌ You are not allowed to delete files.")

        file_id = event.args.strip()
        if not file_id:
            return Reply(ReplyKind.USAGE, "Usage: /delete <file_id>")

        deleted = await self._run_blocking(self.file_service.delete_file, file_id)
        if deleted:
            return Reply(ReplyKind.DELETED, f"🗑 File with ID *{file_id}* deleted successfully.", file_id=file_id, parse_mode=MARKDOWN)
        return Reply(ReplyKind.NOT_DELETED, "⚠️ No file found with that ID.", file_id=file_id)

    async def _cmd_find(self, event: CommandEvent) -> Reply:
        if not self.is_admin(event.user_id):
            return Reply(ReplyKind.FORBIDDEN, "❌ Only admins can look up stored files.")

        fragment = event.args.strip()
        if not fragment:
            return Reply(ReplyKind.USAGE, "Usage: /find <part of a keyword>")

        records = await self._run_blocking(self.search_engine.find_containing, fragment)
        if not records:
            return Reply(ReplyKind.NO_RESULTS, f"❌ No stored file has a keyword containing '{fragment}'.", total_matches=0)

        return Reply(
            ReplyKind.LOOKUP,
            "\n".join(self._describe(record) for record in records),
            total_matches=len(records),
        )

    # Helpers

    def _quota_exceeded_reply(self) -> Reply:
        return Reply(ReplyKind.QUOTA_EXCEEDED, f"⚠️ You reached your daily limit of {self.daily_limit} files.")

    @staticmethod
    def _expired_reply() -> Reply:
        return Reply(ReplyKind.EXPIRED, "❌ File not found or expired.")

    @staticmethod
    def _describe(record: FileRecord) -> str:
        keywords: List[str] = sorted(record.keywords)
        return f"• {record.display_name} [{record.media_kind.value}] id={record.file_id} keywords: {', '.join(keywords)}"

    @staticmethod
    async def _run_blocking(func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args))
