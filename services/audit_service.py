"""
services/audit_service.py
-------------------------
Read-side of the HR audit trail: salary history, transfers and deletion
logs, formatted for the bot. The audit rows themselves are written by the
database triggers and the transfer transaction.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from config import CURRENCY
from repositories.audit_repo import AuditRepository
from repositories.employee_repo import EmployeeRepository
from utils.logger import get_logger

logger = get_logger(__name__)


def _stamp(moment: Optional[datetime]) -> str:
    return moment.strftime("%Y-%m-%d %H:%M") if moment else "-"


class AuditService:
    """Builds human-readable audit reports."""

    def __init__(self):
        self.repo = AuditRepository()
        self.employee_repo = EmployeeRepository()

    def _label(self, employee_id: int) -> str:
        name = self.employee_repo.get_full_name(employee_id)
        return f"#{employee_id} {name}" if name else f"#{employee_id}"

    def salary_history_report(self, employee_id: int) -> str:
        """Salary changes of one employee, oldest first."""
        changes = self.repo.get_salary_history(employee_id)
        if not changes:
            return f"📭 No salary history for employee #{employee_id}."

        lines = [f"💶 Salary history of {self._label(employee_id)}:\n"]
        for c in changes:
            icon = "🆕" if c.is_hire() else ("📈" if c.new_salary > c.old_salary else "📉")
            lines.append(f"  {icon} {_stamp(c.changed_at)} | {c} {CURRENCY} | by {c.changed_by}")

        current = changes[-1].new_salary
        first = changes[0].new_salary
        lines.append(f"\n💰 Current: {current:.2f} {CURRENCY} ({current - first:+.2f} since hire)")
        return "\n".join(lines)

    def transfer_report(self, employee_id: int) -> str:
        """Department/manager moves of one employee, oldest first."""
        transfers = self.repo.get_transfers(employee_id)
        if not transfers:
            return f"📭 No transfers recorded for employee #{employee_id}."

        lines = [f"🔀 Transfers of {self._label(employee_id)}:\n"]
        for t in transfers:
            lines.append(f"  • {_stamp(t.transferred_at)} | {t} | by {t.transferred_by}")
        return "\n".join(lines)

    def deletion_report(self, department_id: Optional[int] = None, limit: int = 20) -> str:
        """Most recent deletions, optionally for one department."""
        deletions = self.repo.get_deletions(department_id=department_id, limit=limit)
        scope = f" (department {department_id})" if department_id is not None else ""
        if not deletions:
            return f"📭 No deleted employees{scope}."

        lines = [f"🗑️ Deleted employees{scope}:\n"]
        for d in deletions:
            salary = f"{d.salary:.2f} {CURRENCY}" if d.salary is not None else "-"
            lines.append(
                f"  • #{d.employee_id} {d.full_name or ''} | {d.job_id or '-'} | "
                f"dept {d.department_id or '-'} | {salary} | {_stamp(d.deleted_at)} by {d.deleted_by}"
            )
        return "\n".join(lines)

    def weekly_digest(self, days: int = 7) -> Optional[str]:
        """
        Summary of audit activity in the last `days` days.

        Returns:
            The digest text, or None when nothing happened.
        """
        since = datetime.now(timezone.utc) - timedelta(days=days)
        salary_changes = self.repo.get_salary_changes_since(since)
        transfers = self.repo.get_transfers_since(since)
        deletions = self.repo.get_deletions_since(since)

        if not (salary_changes or transfers or deletions):
            return None

        hires = [c for c in salary_changes if c.is_hire()]
        raises = [c for c in salary_changes if not c.is_hire()]
        net = sum((c.new_salary - c.old_salary for c in raises), start=0)

        lines = [f"📋 HR activity, last {days} days:\n"]
        lines.append(f"🆕 Hires: {len(hires)}")
        lines.append(f"💶 Salary changes: {len(raises)} (net {net:+.2f} {CURRENCY})")
        lines.append(f"🔀 Transfers: {len(transfers)}")
        lines.append(f"🗑️ Deletions: {len(deletions)}")

        if deletions:
            lines.append("\nRemoved:")
            for d in deletions:
                lines.append(f"  • #{d.employee_id} {d.full_name or ''} (by {d.deleted_by})")

        logger.info(
            f"Built digest: {len(hires)} hires, {len(raises)} salary changes, "
            f"{len(transfers)} transfers, {len(deletions)} deletions"
        )
        return "\n".join(lines)
