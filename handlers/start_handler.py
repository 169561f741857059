"""
handlers/start_handler.py
--------------------------
Handles /start, /help and /myid.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import authorized_only
from security.rate_limiter import rate_limited
from services.employee_service import ALLOWED_UPDATE_COLUMNS
from utils.logger import get_logger

logger = get_logger(__name__)

# Markdown needs underscores escaped
_UPDATABLE = ", ".join(c.lower() for c in ALLOWED_UPDATE_COLUMNS).replace("_", "\\_")

HELP_TEXT = f"""
🤖 *HR Desk*
Employee records with a full audit trail 🗂️

*📝 Hiring:*
Write a plain note and I'll file it, e.g.
• "Hire John Doe as IT\\_PROG, 5000, dept 10, john.doe@example.com, 1234567890"
or use
/add\\_employee first\\_name=John last\\_name=Doe email=... phone\\_number=... job\\_id=IT\\_PROG salary=5000 [hire\\_date=YYYY-MM-DD] [department\\_id=10] [manager\\_id=..] [commission\\_pct=0.1]

*👤 Employees:*
/employee <id> - show a record
/employees [job] [dept] - list employees
/fullname <id> - employee name
/update <id> <column> <value> - change one column
/transfer <id> <dept> [manager] - move an employee
/delete\\_employee <id> - remove an employee
/raise\\_dept <dept> <amount> - adjust all salaries in a department

*🧾 Audit:*
/salary\\_history <id> - salary changes
/transfers <id> - department/manager moves
/deletions [dept] - deleted employees

*🏢 Organization:*
/jobs - job catalogue and salary bands
/departments - headcount and payroll

*📦 Reports:*
/export\\_csv [dept] - employee register (CSV)
/export\\_excel [dept] - register + audit trail (Excel)
/chart - payroll by department
/chart\\_jobs - salary bands vs actual salaries

Updatable columns: {_UPDATABLE}
/myid - your Telegram ID
"""


@authorized_only
@rate_limited
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - show welcome message."""
    user = update.effective_user
    logger.info(f"User {user.id} ({user.first_name}) started the bot.")

    await update.message.reply_text(
        f"Hello {user.first_name}! 👋\n"
        f"I keep the employee records: hiring, updates, transfers and removals, "
        f"with every salary change, transfer and deletion audited.\n\n"
        f"Type /help to see all commands.",
    )


@authorized_only
@rate_limited
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT, parse_mode="Markdown")


@authorized_only
async def myid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /myid command - show user's Telegram ID for whitelisting."""
    user = update.effective_user
    await update.message.reply_text(
        f"🆔 Your Telegram ID: `{user.id}`\n"
        f"Add it to `ALLOWED_USER_IDS` in `.env` to lock the bot down.",
        parse_mode="Markdown",
    )
