"""
handlers/org_handler.py
------------------------
Handles /jobs and /departments.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import authorized_only
from security.rate_limiter import rate_limited
from services.org_service import OrgService

org_service = OrgService()


@authorized_only
@rate_limited
async def jobs_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /jobs - show the job catalogue with salary bands."""
    await update.message.reply_text(org_service.jobs_report())


@authorized_only
@rate_limited
async def departments_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /departments - show departments with headcount and payroll."""
    await update.message.reply_text(org_service.departments_report())
