"""Telegram bot delivering the weekly and daily notifications."""

import logging
import os
from datetime import time

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.constants import ParseMode
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    JobQueue,
    MessageHandler,
    filters,
)

from ..app import WeeksApp
from ..config import WeeksConfig, config_from_env
from ..life import CachedStats, parse_birth_date
from ..logging import configure_logger
from ..notifications import (
    DAILY_REFLECTION_NOTIFICATION_ID,
    DAILY_REFLECTION_TYPE,
    NOTIFICATION_TYPE_KEY,
    NotificationRequest,
)
from ..reflections import (
    Reflection,
    ReflectionType,
    decode_reflection_type,
    parse_reflection_type,
)

logger = logging.getLogger(__name__)

OWNER_CHAT_KEY = "telegramChatId"
PENDING_TYPE_KEY = "pending_reflection_type"

TAP_PREFIX = "tap:"
TYPE_PREFIX = "type:"

MAX_MESSAGE_LENGTH = 4096

WELCOME_MESSAGE = """
⬛ *Life in Weeks*

Each week of an 80 year life is one dot. I'll tell you every Sunday how many
are left, and every evening ask how your day went.

*Commands:*
/birthday YYYY-MM-DD - Set your birthday
/stats - Your life in weeks
/reflect - Write today's reflection
/reflections - Past reflections
/reflection ID - Read one reflection in full
/delete ID - Delete a reflection
"""

NOT_OWNER_MESSAGE = "This bot already belongs to someone else."


def truncate_message(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """Truncate message to fit Telegram limits."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 20] + "\n... [truncated]"


def format_stats(cached: CachedStats) -> str:
    """Format life stats for Telegram."""
    return (
        f"Your age: {cached.age}\n"
        f"Weeks lived: {cached.weeks_lived:,}\n"
        f"Weeks remaining: {cached.weeks_remaining:,}\n"
        f"Percentage of life: {cached.percentage}%"
    )


def format_reflections(reflections: list[Reflection]) -> str:
    """Format a list of reflections for Telegram."""
    if not reflections:
        return "No reflections yet. Your daily reflections will appear here."

    lines = []
    for reflection in reflections:
        badge = "🟢" if reflection.type is ReflectionType.SPENT_WELL else "🔴"
        day = reflection.date.astimezone().strftime("%b %d, %Y")
        lines.append(f"#{reflection.id} {day} {badge} {reflection.type.label}")
        if reflection.explanation:
            lines.append(f"    {reflection.explanation}")
    return truncate_message("\n".join(lines))


def format_reflection_detail(reflection: Reflection) -> str:
    """Date, type and the full explanation of one reflection."""
    badge = "🟢" if reflection.type is ReflectionType.SPENT_WELL else "🔴"
    day = reflection.date.astimezone().strftime("%A, %B %d, %Y")
    return truncate_message(
        f"#{reflection.id} {day}\n{badge} {reflection.type.label}\n\n{reflection.explanation}"
    )


def reflection_type_keyboard() -> InlineKeyboardMarkup:
    """Buttons for choosing how the day went."""
    return InlineKeyboardMarkup([[
        InlineKeyboardButton(t.label, callback_data=f"{TYPE_PREFIX}{t.label}")
        for t in ReflectionType
    ]])


def notification_keyboard(request: NotificationRequest) -> InlineKeyboardMarkup | None:
    """A "Reflect now" button for notifications that lead to the reflection entry."""
    kind = request.user_info.get(NOTIFICATION_TYPE_KEY)
    if kind != DAILY_REFLECTION_TYPE:
        return None
    return InlineKeyboardMarkup([[
        InlineKeyboardButton("Reflect now", callback_data=f"{TAP_PREFIX}{kind}")
    ]])


class TelegramBot:
    """Single-user Telegram bot for Weeks."""

    def __init__(
        self,
        token: str | None = None,
        config: WeeksConfig | None = None,
        app: WeeksApp | None = None,
    ) -> None:
        self.token = token or os.getenv("TELEGRAM_TOKEN")
        if not self.token:
            raise ValueError("TELEGRAM_TOKEN not set")

        if app is None:
            config = config or config_from_env()
            app = WeeksApp(config, logger=configure_logger(config.log_dir))

        self.app = app
        self.json_logger = app.logger
        self._application: Application | None = None

    @property
    def owner_chat_id(self) -> int | None:
        value = self.app.preferences.get(OWNER_CHAT_KEY)
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring unreadable %s=%r", OWNER_CHAT_KEY, value)
            return None

    def _get_chat_id(self, update: Update) -> int:
        """Get chat_id from update."""
        assert update.effective_chat is not None
        return update.effective_chat.id

    def _is_owner(self, chat_id: int) -> bool:
        return self.owner_chat_id == chat_id

    async def _reply(self, update: Update, text: str, **kwargs) -> None:
        if update.message is not None:
            await update.message.reply_text(text, **kwargs)
        elif update.callback_query is not None and update.callback_query.message is not None:
            await update.callback_query.message.reply_text(text, **kwargs)

    # Scheduling

    async def _send_notification(self, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Job callback: send the notification named by the job."""
        job = context.job
        assert job is not None

        request: NotificationRequest | None
        if job.name == DAILY_REFLECTION_NOTIFICATION_ID:
            request = self.app.daily_notification()
        else:
            request = self.app.weekly_notification()

        if request is None:
            logger.info("Skipping %s: no birthday set", job.name)
            return

        await context.bot.send_message(
            chat_id=job.chat_id,
            text=f"*{request.title}*\n{request.body}",
            parse_mode=ParseMode.MARKDOWN,
            reply_markup=notification_keyboard(request),
        )
        self.json_logger.log(
            "notification_sent", chat_id=str(job.chat_id), notification_id=request.identifier
        )

    def _schedule(
        self,
        job_queue: JobQueue | None,
        request: NotificationRequest | None,
        chat_id: int,
    ) -> None:
        """Replace the repeating job for a notification."""
        if job_queue is None:
            logger.warning("No job queue available; notifications are not scheduled")
            return
        if request is None:
            return

        for job in job_queue.get_jobs_by_name(request.identifier):
            job.schedule_removal()

        schedule = request.schedule
        days = (schedule.weekday,) if schedule.weekday is not None else tuple(range(7))
        job_queue.run_daily(
            self._send_notification,
            time=time(schedule.hour, schedule.minute, tzinfo=self.app.config.tz),
            days=days,
            name=request.identifier,
            chat_id=chat_id,
        )
        self.json_logger.log_notification(request.identifier, chat_id=str(chat_id))

    def schedule_notifications(self, job_queue: JobQueue | None, chat_id: int) -> None:
        """Schedule both the weekly and the daily notification."""
        self._schedule(job_queue, self.app.weekly_notification(), chat_id)
        self._schedule(job_queue, self.app.daily_notification(), chat_id)

    # Handlers

    async def _handle_start(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /start command: claim the bot and schedule notifications."""
        assert update.message is not None
        chat_id = self._get_chat_id(update)

        owner = self.owner_chat_id
        if owner is not None and owner != chat_id:
            await update.message.reply_text(NOT_OWNER_MESSAGE)
            return

        self.app.preferences.set(OWNER_CHAT_KEY, chat_id)
        self.app.preferences.save()
        self.json_logger.log("telegram_start", chat_id=str(chat_id))

        self.schedule_notifications(context.job_queue, chat_id)

        await update.message.reply_text(WELCOME_MESSAGE, parse_mode=ParseMode.MARKDOWN)
        if not self.app.birthday_string:
            await update.message.reply_text(
                "Please enter your birthday: /birthday YYYY-MM-DD"
            )

    async def _handle_birthday(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /birthday YYYY-MM-DD."""
        assert update.message is not None
        chat_id = self._get_chat_id(update)
        if not self._is_owner(chat_id):
            await update.message.reply_text(NOT_OWNER_MESSAGE)
            return

        args = context.args or []
        if not args:
            current = self.app.birthday_string or "not set"
            await update.message.reply_text(
                f"Birthday: {current}\nUsage: /birthday YYYY-MM-DD"
            )
            return

        birth_date = parse_birth_date(args[0])
        if birth_date is None or birth_date > self.app.clock().date():
            await update.message.reply_text(
                f"'{args[0]}' is not a valid birthday. Usage: /birthday YYYY-MM-DD"
            )
            return

        cached = self.app.set_birthday(birth_date)
        self._schedule(context.job_queue, self.app.weekly_notification(), chat_id)

        await update.message.reply_text(
            f"✓ Birthday set to {self.app.birthday_string}\n\n{format_stats(cached)}"
        )

    async def _handle_stats(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /stats command."""
        assert update.message is not None
        if not self._is_owner(self._get_chat_id(update)):
            await update.message.reply_text(NOT_OWNER_MESSAGE)
            return

        if not self.app.birthday_string:
            await update.message.reply_text("Set your birthday first: /birthday YYYY-MM-DD")
            return

        await update.message.reply_text(format_stats(self.app.stats()))

    async def _handle_reflect(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /reflect [TYPE EXPLANATION...]."""
        assert update.message is not None
        chat_id = self._get_chat_id(update)
        if not self._is_owner(chat_id):
            await update.message.reply_text(NOT_OWNER_MESSAGE)
            return

        args = context.args or []
        if not args:
            await self._open_reflection_entry(update)
            return

        try:
            reflection_type = parse_reflection_type(args[0])
        except ValueError as e:
            await update.message.reply_text(str(e))
            return

        reflection = self.app.add_reflection(
            reflection_type, " ".join(args[1:]), chat_id=str(chat_id)
        )
        await update.message.reply_text(
            f"✓ Saved reflection #{reflection.id} ({reflection.type.label})"
        )

    async def _handle_reflections(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /reflections command."""
        assert update.message is not None
        if not self._is_owner(self._get_chat_id(update)):
            await update.message.reply_text(NOT_OWNER_MESSAGE)
            return

        reflections = self.app.list_reflections(limit=20)
        await update.message.reply_text(format_reflections(reflections))

    async def _handle_reflection(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /reflection ID."""
        assert update.message is not None
        if not self._is_owner(self._get_chat_id(update)):
            await update.message.reply_text(NOT_OWNER_MESSAGE)
            return

        args = context.args or []
        if len(args) != 1 or not args[0].lstrip("#").isdigit():
            await update.message.reply_text("Usage: /reflection ID")
            return

        reflection_id = int(args[0].lstrip("#"))
        reflection = self.app.get_reflection(reflection_id)
        if reflection is None:
            await update.message.reply_text(f"Reflection #{reflection_id} was already gone.")
            return

        await update.message.reply_text(format_reflection_detail(reflection))

    async def _handle_delete(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /delete ID."""
        assert update.message is not None
        chat_id = self._get_chat_id(update)
        if not self._is_owner(chat_id):
            await update.message.reply_text(NOT_OWNER_MESSAGE)
            return

        args = context.args or []
        if len(args) != 1 or not args[0].lstrip("#").isdigit():
            await update.message.reply_text("Usage: /delete ID")
            return

        reflection_id = int(args[0].lstrip("#"))
        if self.app.delete_reflection(reflection_id, chat_id=str(chat_id)):
            await update.message.reply_text(f"✓ Deleted reflection #{reflection_id}")
        else:
            await update.message.reply_text(f"Reflection #{reflection_id} was already gone.")

    async def _open_reflection_entry(self, update: Update) -> None:
        await self._reply(
            update, "How was your day?", reply_markup=reflection_type_keyboard()
        )

    async def _handle_callback(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle inline button presses."""
        query = update.callback_query
        assert query is not None
        await query.answer()

        chat_id = self._get_chat_id(update)
        if not self._is_owner(chat_id):
            return

        data = query.data or ""
        if data.startswith(TAP_PREFIX):
            self.app.navigation.handle_notification_tap(
                {NOTIFICATION_TYPE_KEY: data[len(TAP_PREFIX):]}
            )
            self.json_logger.log("notification_tap", chat_id=str(chat_id))
            if self.app.navigation.consume():
                await self._open_reflection_entry(update)
            return

        if data.startswith(TYPE_PREFIX):
            reflection_type = decode_reflection_type(data[len(TYPE_PREFIX):])
            context.chat_data[PENDING_TYPE_KEY] = reflection_type.label
            await query.edit_message_text(
                f"{reflection_type.label}. What did you get done today?"
            )

    async def _handle_message(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle plain text: the explanation of a pending reflection."""
        assert update.message is not None
        assert update.message.text is not None
        chat_id = self._get_chat_id(update)
        if not self._is_owner(chat_id):
            await update.message.reply_text(NOT_OWNER_MESSAGE)
            return

        label = context.chat_data.pop(PENDING_TYPE_KEY, None)
        if label is None:
            await update.message.reply_text("Use /reflect to write today's reflection.")
            return

        try:
            reflection = self.app.add_reflection(
                ReflectionType(label), update.message.text, chat_id=str(chat_id)
            )
        except Exception as e:
            logger.exception("Error saving reflection")
            self.json_logger.log("telegram_error", chat_id=str(chat_id), error=str(e))
            await update.message.reply_text(f"❌ Error: {e}")
            return

        await update.message.reply_text(
            f"✓ Saved reflection #{reflection.id} ({reflection.type.label})"
        )

    async def _handle_error(
        self, update: object, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Log errors raised by any handler."""
        logger.error("Error handling update", exc_info=context.error)
        self.json_logger.log("telegram_error", error=str(context.error))

    async def _post_init(self, application: Application) -> None:
        """Called after Application.initialize(): restore the schedules."""
        owner = self.owner_chat_id
        if owner is not None:
            self.schedule_notifications(application.job_queue, owner)

    async def _post_shutdown(self, application: Application) -> None:
        """Called after Application.shutdown()."""
        self.app.close()

    def build_app(self) -> Application:
        """Build the Telegram application."""
        self._application = (
            Application.builder()
            .token(self.token)
            .post_init(self._post_init)
            .post_shutdown(self._post_shutdown)
            .build()
        )

        # Add handlers
        self._application.add_handler(CommandHandler("start", self._handle_start))
        self._application.add_handler(CommandHandler("birthday", self._handle_birthday))
        self._application.add_handler(CommandHandler("stats", self._handle_stats))
        self._application.add_handler(CommandHandler("reflect", self._handle_reflect))
        self._application.add_handler(
            CommandHandler("reflections", self._handle_reflections)
        )
        self._application.add_handler(
            CommandHandler("reflection", self._handle_reflection)
        )
        self._application.add_handler(CommandHandler("delete", self._handle_delete))
        self._application.add_handler(CallbackQueryHandler(self._handle_callback))
        self._application.add_handler(
            MessageHandler(filters.TEXT & ~filters.COMMAND, self._handle_message)
        )
        self._application.add_error_handler(self._handle_error)

        return self._application

    def run(self) -> None:
        """Run the bot (blocking)."""
        app = self.build_app()

        logger.info("Starting Telegram bot...")
        app.run_polling()
