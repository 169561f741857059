"""
repositories/audit_repo.py
--------------------------
Read access to the audit tables (salary_history, deletion_logs,
transfer_history). Rows are written by the employee triggers and by
EmployeeRepository.transfer, never from here.
"""

from datetime import datetime
from typing import Optional

from db.connection import get_connection, release_connection
from models.audit import DeletionLog, SalaryChange, Transfer
from utils.logger import get_logger

logger = get_logger(__name__)


class AuditRepository:
    """Queries over the HR audit trail."""

    # ── SALARY HISTORY ────────────────────────────────────

    def get_salary_history(self, employee_id: int) -> list[SalaryChange]:
        """All salary changes of one employee, oldest first."""
        sql = """
            SELECT id, employee_id, old_salary, new_salary, changed_by, changed_at
            FROM salary_history
            WHERE employee_id = %s
            ORDER BY changed_at ASC, id ASC;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (employee_id,))
                return [self._row_to_salary_change(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_salary_changes_since(self, since: datetime) -> list[SalaryChange]:
        sql = """
            SELECT id, employee_id, old_salary, new_salary, changed_by, changed_at
            FROM salary_history
            WHERE changed_at >= %s
            ORDER BY changed_at ASC, id ASC;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (since,))
                return [self._row_to_salary_change(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_salary_history_for(self, employee_ids: list[int]) -> list[SalaryChange]:
        """Salary changes of several employees in one query, grouped by employee."""
        if not employee_ids:
            return []
        sql = """
            SELECT id, employee_id, old_salary, new_salary, changed_by, changed_at
            FROM salary_history
            WHERE employee_id = ANY(%s)
            ORDER BY employee_id, changed_at ASC, id ASC;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (list(employee_ids),))
                return [self._row_to_salary_change(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    # ── TRANSFERS ─────────────────────────────────────────

    def get_transfers(self, employee_id: int) -> list[Transfer]:
        """All transfers of one employee, oldest first."""
        sql = """
            SELECT id, employee_id, old_department, new_department,
                   old_manager, new_manager, transferred_by, transferred_at
            FROM transfer_history
            WHERE employee_id = %s
            ORDER BY transferred_at ASC, id ASC;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (employee_id,))
                return [self._row_to_transfer(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_transfers_for(self, employee_ids: list[int]) -> list[Transfer]:
        if not employee_ids:
            return []
        sql = """
            SELECT id, employee_id, old_department, new_department,
                   old_manager, new_manager, transferred_by, transferred_at
            FROM transfer_history
            WHERE employee_id = ANY(%s)
            ORDER BY employee_id, transferred_at ASC, id ASC;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (list(employee_ids),))
                return [self._row_to_transfer(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_transfers_since(self, since: datetime) -> list[Transfer]:
        sql = """
            SELECT id, employee_id, old_department, new_department,
                   old_manager, new_manager, transferred_by, transferred_at
            FROM transfer_history
            WHERE transferred_at >= %s
            ORDER BY transferred_at ASC, id ASC;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (since,))
                return [self._row_to_transfer(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    # ── DELETIONS ─────────────────────────────────────────

    def get_deletions(self, department_id: Optional[int] = None,
                      limit: int = 20) -> list[DeletionLog]:
        """
        Most recent deletion logs first.

        Args:
            department_id: Only deletions from this department.
            limit: Maximum number of rows.
        """
        sql = """
            SELECT id, employee_id, full_name, job_id, department_id, salary, deleted_by, deleted_at
            FROM deletion_logs
            WHERE TRUE
        """
        params: list = []
        if department_id is not None:
            sql += " AND department_id = %s"
            params.append(department_id)
        sql += " ORDER BY deleted_at DESC, id DESC LIMIT %s;"
        params.append(limit)

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [self._row_to_deletion(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_deletions_since(self, since: datetime) -> list[DeletionLog]:
        sql = """
            SELECT id, employee_id, full_name, job_id, department_id, salary, deleted_by, deleted_at
            FROM deletion_logs
            WHERE deleted_at >= %s
            ORDER BY deleted_at ASC, id ASC;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (since,))
                return [self._row_to_deletion(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_salary_change(row: tuple) -> SalaryChange:
        return SalaryChange(
            id=row[0],
            employee_id=row[1],
            old_salary=row[2],
            new_salary=row[3],
            changed_by=row[4],
            changed_at=row[5],
        )

    @staticmethod
    def _row_to_transfer(row: tuple) -> Transfer:
        return Transfer(
            id=row[0],
            employee_id=row[1],
            old_department=row[2],
            new_department=row[3],
            old_manager=row[4],
            new_manager=row[5],
            transferred_by=row[6],
            transferred_at=row[7],
        )

    @staticmethod
    def _row_to_deletion(row: tuple) -> DeletionLog:
        return DeletionLog(
            id=row[0],
            employee_id=row[1],
            full_name=row[2],
            job_id=row[3],
            department_id=row[4],
            salary=row[5],
            deleted_by=row[6],
            deleted_at=row[7],
        )
