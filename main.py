"""
main.py
-------
Entry point for the HR Desk Telegram bot.

Responsibilities:
    - Initialize the database connection pool, schema and reference data.
    - Configure and start the Telegram bot with all handlers.
    - Schedule the weekly audit digest.
"""

from datetime import time as dt_time

from telegram import BotCommand, Update
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from config import (
    ALLOWED_USER_IDS,
    DB_POOL_MAX,
    DB_POOL_MIN,
    SEED_REFERENCE_DATA,
    TELEGRAM_BOT_TOKEN,
)
from db.connection import init_pool, close_pool
from db.init_db import create_tables, seed_reference_data
from handlers.start_handler import start_command, help_command, myid_command
from handlers.employee_handler import (
    handle_text_message,
    add_employee_command,
    employee_command,
    employees_command,
    fullname_command,
    update_command,
    transfer_command,
    delete_employee_command,
    raise_dept_command,
)
from handlers.audit_handler import (
    salary_history_command,
    transfers_command,
    deletions_command,
)
from handlers.org_handler import jobs_command, departments_command
from handlers.export_handler import export_csv_command, export_excel_command
from handlers.chart_handler import chart_command, chart_jobs_command
from services.audit_service import AuditService
from utils.logger import get_logger

logger = get_logger(__name__)

COMMANDS = [
    ("start", start_command, "🚀 Start the bot"),
    ("help", help_command, "📖 Show help"),
    ("add_employee", add_employee_command, "➕ Hire an employee"),
    ("employee", employee_command, "👤 Show an employee"),
    ("employees", employees_command, "👥 List employees"),
    ("fullname", fullname_command, "🪪 Employee full name"),
    ("update", update_command, "✏️ Change one column"),
    ("transfer", transfer_command, "🔀 Transfer an employee"),
    ("delete_employee", delete_employee_command, "🗑️ Remove an employee"),
    ("raise_dept", raise_dept_command, "💶 Adjust department salaries"),
    ("salary_history", salary_history_command, "🧾 Salary history"),
    ("transfers", transfers_command, "🧾 Transfer history"),
    ("deletions", deletions_command, "🧾 Deletion logs"),
    ("jobs", jobs_command, "💼 Jobs and salary bands"),
    ("departments", departments_command, "🏢 Departments and payroll"),
    ("export_csv", export_csv_command, "📄 Export CSV"),
    ("export_excel", export_excel_command, "📊 Export Excel"),
    ("chart", chart_command, "📊 Payroll chart"),
    ("chart_jobs", chart_jobs_command, "📈 Salary band chart"),
    ("myid", myid_command, "🆔 Your Telegram ID"),
]


async def send_weekly_digest(context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Scheduled job: send the audit digest to every whitelisted operator.
    Runs every Sunday at 20:00. Quiet weeks send nothing.
    """
    digest = AuditService().weekly_digest()
    if digest is None:
        logger.info("No HR activity this week, digest skipped.")
        return

    for user_id in ALLOWED_USER_IDS:
        try:
            await context.bot.send_message(chat_id=user_id, text=digest)
            logger.info(f"Sent weekly digest to user {user_id}")
        except Exception as e:
            logger.error(f"Failed to send weekly digest to {user_id}: {e}")


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log unexpected handler errors and tell the operator something went wrong."""
    logger.error(f"Unhandled error while processing an update: {context.error}", exc_info=context.error)
    if isinstance(update, Update) and update.effective_message:
        await update.effective_message.reply_text("❌ Something went wrong. Please try again later.")


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    await application.bot.set_my_commands(
        [BotCommand(name, description) for name, _, description in COMMANDS]
    )
    logger.info("Bot commands menu registered successfully.")


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool(DB_POOL_MIN, DB_POOL_MAX)
    create_tables()
    if SEED_REFERENCE_DATA:
        seed_reference_data()

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = Application.builder().token(TELEGRAM_BOT_TOKEN).post_init(set_bot_commands).build()

    # ── 3. Register command handlers ──────────────────────
    for name, callback, _ in COMMANDS:
        app.add_handler(CommandHandler(name, callback))

    # ── 4. Register text message handler (catch-all) ──────
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_text_message))
    app.add_error_handler(on_error)

    # ── 5. Schedule jobs ──────────────────────────────────
    job_queue = app.job_queue
    if job_queue and ALLOWED_USER_IDS:
        job_queue.run_daily(
            send_weekly_digest,
            time=dt_time(hour=20, minute=0),
            days=(0,),  # Sunday
            name="weekly_digest",
        )
        logger.info("Scheduled weekly audit digest (Sunday 20:00)")

    # ── 6. Start polling ──────────────────────────────────
    logger.info("🚀 HR Desk is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message"])

    # ── 7. Cleanup on shutdown ────────────────────────────
    close_pool()
    logger.info("HR Desk stopped.")


if __name__ == "__main__":
    main()
