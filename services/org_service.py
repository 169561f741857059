"""
services/org_service.py
-----------------------
Reports over the reference data: the job catalogue with salary bands and
the departments with their headcount and payroll.
"""

from config import CURRENCY
from repositories.org_repo import DepartmentRepository, JobRepository


class OrgService:
    """Formats jobs and departments for the bot."""

    def __init__(self):
        self.job_repo = JobRepository()
        self.department_repo = DepartmentRepository()

    def jobs_report(self) -> str:
        jobs = self.job_repo.get_all()
        if not jobs:
            return "📭 The jobs catalogue is empty."

        lines = ["💼 Jobs and salary bands:\n"]
        for job in jobs:
            lines.append(f"  • {job}")
        return "\n".join(lines)

    def departments_report(self) -> str:
        departments = self.department_repo.get_all()
        if not departments:
            return "📭 No departments defined."

        stats = {s["department_id"]: s for s in self.department_repo.get_payroll_summary()}

        lines = ["🏢 Departments:\n"]
        for dept in departments:
            s = stats.get(dept.department_id)
            if s:
                lines.append(
                    f"  • {dept} | 👥 {s['headcount']} | 💶 {s['payroll']:.2f} {CURRENCY}"
                )
            else:
                lines.append(f"  • {dept} | 👥 0")

        unassigned = stats.get(None)
        if unassigned:
            lines.append(f"\n👤 Without department: {unassigned['headcount']}")
        return "\n".join(lines)
