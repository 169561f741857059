"""
handlers/export_handler.py
---------------------------
Handles data export commands (CSV, Excel).
Delegates to ExportService.
"""

from datetime import date

from telegram import Update
from telegram.ext import ContextTypes

from services.export_service import ExportService
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)
export_service = ExportService()


async def _department_arg(update: Update, context: ContextTypes.DEFAULT_TYPE, command: str):
    """Returns (ok, department_id)."""
    if not context.args:
        return True, None
    try:
        return True, int(context.args[0])
    except ValueError:
        await update.message.reply_text(f"⚠️ Usage: /{command} [dept]\nExample: /{command} 10")
        return False, None


def _filename(extension: str, department_id) -> str:
    scope = f"dept{department_id}" if department_id is not None else "all"
    return f"employees_{scope}_{date.today():%Y%m%d}.{extension}"


@authorized_only
@rate_limited
async def export_csv_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /export_csv command - send the employee register as CSV.
    Optional: /export_csv 10 (department 10 only).
    """
    ok, department_id = await _department_arg(update, context, "export_csv")
    if not ok:
        return

    await update.message.reply_text("📄 Preparing the CSV file...")

    try:
        buffer = export_service.export_employees_csv(department_id)
        await update.message.reply_document(
            document=buffer,
            filename=_filename("csv", department_id),
            caption="📊 Employee register - CSV",
        )
    except Exception as e:
        logger.error(f"CSV export failed: {e}")
        await update.message.reply_text("❌ The export failed. Please try again.")


@authorized_only
@rate_limited
async def export_excel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /export_excel command - send the register and the audit trail as Excel.
    Optional: /export_excel 10 (department 10 only).
    """
    ok, department_id = await _department_arg(update, context, "export_excel")
    if not ok:
        return

    await update.message.reply_text("📊 Preparing the Excel file...")

    try:
        buffer = export_service.export_employees_excel(department_id)
        await update.message.reply_document(
            document=buffer,
            filename=_filename("xlsx", department_id),
            caption="📊 Employee register and audit trail - Excel",
        )
    except Exception as e:
        logger.error(f"Excel export failed: {e}")
        await update.message.reply_text("❌ The export failed. Please try again.")
