"""
handlers/chart_handler.py
--------------------------
Handles chart generation commands.
Delegates to ChartService and sends images to the user.
"""

from telegram import Update
from telegram.ext import ContextTypes

from services.chart_service import ChartService
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)
chart_service = ChartService()


@authorized_only
@rate_limited
async def chart_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /chart command - send a donut chart of payroll per department."""
    await update.message.reply_text("📊 Drawing the chart...")

    buf = chart_service.payroll_by_department()
    if buf:
        await update.message.reply_photo(photo=buf, caption="📊 Payroll by department")
    else:
        await update.message.reply_text("📭 No employees on the payroll yet.")


@authorized_only
@rate_limited
async def chart_jobs_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /chart_jobs command - send salary bands against actual salaries per job."""
    await update.message.reply_text("📈 Drawing the chart...")

    buf = chart_service.salary_bands()
    if buf:
        await update.message.reply_photo(photo=buf, caption="📈 Salary bands vs actual salaries")
    else:
        await update.message.reply_text("📭 No job has staff yet.")
