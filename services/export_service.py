"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of the employee register and its audit trail.
"""

import io
from dataclasses import asdict

import pandas as pd

from repositories.audit_repo import AuditRepository
from repositories.employee_repo import EmployeeRepository
from utils.logger import get_logger

logger = get_logger(__name__)

_EMPLOYEE_COLUMNS = [
    "id", "first_name", "last_name", "email", "phone_number", "hire_date",
    "job_id", "salary", "commission_pct", "manager_id", "department_id",
]


def _naive(df: pd.DataFrame, *columns: str) -> pd.DataFrame:
    """Excel cannot store timezone-aware datetimes."""
    for col in columns:
        if col in df and not df.empty:
            df[col] = pd.to_datetime(df[col], utc=True).dt.tz_localize(None)
    return df


class ExportService:
    """Generates downloadable HR reports in CSV and Excel formats."""

    def __init__(self):
        self.repo = EmployeeRepository()
        self.audit_repo = AuditRepository()

    def _employees_frame(self, department_id=None) -> pd.DataFrame:
        employees = self.repo.list_all(department_id=department_id)
        data = [
            {
                **{k: v for k, v in asdict(e).items() if k in _EMPLOYEE_COLUMNS},
                "salary": float(e.salary),
                "commission_pct": float(e.commission_pct) if e.commission_pct is not None else None,
            }
            for e in employees
        ]
        return pd.DataFrame(data, columns=_EMPLOYEE_COLUMNS).rename(columns={"id": "employee_id"})

    def export_employees_csv(self, department_id=None) -> io.BytesIO:
        """
        Export the employee register as a CSV file.

        Args:
            department_id: Only this department (default: everyone).

        Returns:
            A BytesIO buffer containing the CSV data.
        """
        df = self._employees_frame(department_id)
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(df)} employees as CSV")
        return buffer

    def export_employees_excel(self, department_id=None) -> io.BytesIO:
        """
        Export the employee register as an Excel (.xlsx) workbook.

        Sheets: Employees, Salary history (for the exported employees),
        Transfers, Deletions (most recent 500).

        Returns:
            A BytesIO buffer containing the Excel data.
        """
        df = self._employees_frame(department_id)
        ids = df["employee_id"].tolist()

        salary_rows = [asdict(c) for c in self.audit_repo.get_salary_history_for(ids)]
        transfer_rows = [asdict(t) for t in self.audit_repo.get_transfers_for(ids)]
        deletion_rows = [
            asdict(d) for d in self.audit_repo.get_deletions(department_id=department_id, limit=500)
        ]

        salary_df = _naive(pd.DataFrame(salary_rows), "changed_at")
        transfer_df = _naive(pd.DataFrame(transfer_rows), "transferred_at")
        deletion_df = _naive(pd.DataFrame(deletion_rows), "deleted_at")

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Employees", index=False)
            salary_df.to_excel(writer, sheet_name="Salary history", index=False)
            transfer_df.to_excel(writer, sheet_name="Transfers", index=False)
            deletion_df.to_excel(writer, sheet_name="Deletions", index=False)

            if not df.empty:
                summary = (
                    df.groupby("department_id", dropna=False)["salary"]
                    .agg(["count", "sum", "mean"])
                    .reset_index()
                )
                summary.columns = ["department_id", "headcount", "payroll", "average_salary"]
                summary.to_excel(writer, sheet_name="Summary", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(df)} employees as Excel")
        return buffer
