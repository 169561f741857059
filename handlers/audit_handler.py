"""
handlers/audit_handler.py
--------------------------
Handles the audit trail commands: salary history, transfer history and
deletion logs. Delegates to AuditService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import authorized_only
from security.rate_limiter import rate_limited
from services.audit_service import AuditService
from utils.logger import get_logger

logger = get_logger(__name__)
audit_service = AuditService()


async def _employee_id_arg(update: Update, context: ContextTypes.DEFAULT_TYPE, usage: str) -> int | None:
    if not context.args:
        await update.message.reply_text(f"⚠️ Usage: {usage}")
        return None
    try:
        return int(context.args[0])
    except ValueError:
        await update.message.reply_text("⚠️ The employee id must be a whole number.")
        return None


@authorized_only
@rate_limited
async def salary_history_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /salary_history <id> - list every salary change of an employee."""
    employee_id = await _employee_id_arg(update, context, "/salary_history <id>")
    if employee_id is None:
        return

    await update.message.reply_text(audit_service.salary_history_report(employee_id))


@authorized_only
@rate_limited
async def transfers_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /transfers <id> - list department/manager moves of an employee."""
    employee_id = await _employee_id_arg(update, context, "/transfers <id>")
    if employee_id is None:
        return

    await update.message.reply_text(audit_service.transfer_report(employee_id))


@authorized_only
@rate_limited
async def deletions_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /deletions [dept] - show the most recent deletion logs.

    Usage:
        /deletions      → all departments
        /deletions 10   → department 10 only
    """
    department_id = None
    if context.args:
        try:
            department_id = int(context.args[0])
        except ValueError:
            await update.message.reply_text("⚠️ Usage: /deletions [dept]\nExample: /deletions 10")
            return

    await update.message.reply_text(audit_service.deletion_report(department_id))
