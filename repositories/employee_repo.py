"""
repositories/employee_repo.py
-----------------------------
Data access layer for employee records.
All SQL queries related to the `employees` table live here. Salary and
deletion auditing happen in the table's triggers; transfers are audited here
in the same transaction as the move.
"""

from decimal import Decimal
from typing import Optional

from psycopg2 import sql

from db.connection import get_connection, release_connection, set_actor
from db.errors import raise_translated
from models.audit import Transfer
from models.employee import Employee
from utils.exceptions import InvalidValueError
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = (
    "employee_id, first_name, last_name, email, phone_number, hire_date, "
    "job_id, salary, commission_pct, manager_id, department_id"
)


class EmployeeRepository:
    """Repository for CRUD operations on the employees table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, employee: Employee, actor: Optional[str] = None) -> Employee:
        """
        Insert a new employee. The id comes from ``employee_id_seq``.

        Args:
            employee: The Employee domain object to persist.
            actor: Operator recorded in the salary_history row.

        Returns:
            The same Employee with its `id` populated.

        Raises:
            HRError: On a duplicate email/phone, unknown job/department/manager
                or a salary outside the job's band.
        """
        query = """
            INSERT INTO employees
                (first_name, last_name, email, phone_number, hire_date,
                 job_id, salary, commission_pct, manager_id, department_id)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING employee_id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                set_actor(cur, actor)
                cur.execute(query, (
                    employee.first_name, employee.last_name, employee.email,
                    employee.phone_number, employee.hire_date, employee.job_id,
                    employee.salary, employee.commission_pct, employee.manager_id,
                    employee.department_id,
                ))
                employee.id = cur.fetchone()[0]
            conn.commit()
            logger.info(f"Employee inserted successfully with ID: {employee.id}")
            return employee
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add employee {employee.email}: {e}")
            raise_translated(e)
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        """Fetch a single employee, or None if the id is unknown."""
        query = f"SELECT {_COLUMNS} FROM employees WHERE employee_id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(query, (employee_id,))
                row = cur.fetchone()
                return self._row_to_employee(row) if row else None
        finally:
            release_connection(conn)

    def get_full_name(self, employee_id: int) -> Optional[str]:
        """Return "first last" for an employee, or None if the id is unknown."""
        query = "SELECT first_name || ' ' || last_name FROM employees WHERE employee_id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(query, (employee_id,))
                row = cur.fetchone()
                return row[0] if row else None
        finally:
            release_connection(conn)

    def list_all(self, job_id: Optional[str] = None,
                 department_id: Optional[int] = None) -> list[Employee]:
        """
        List employees, optionally filtered by job and/or department.

        Returns:
            Employees ordered by id.
        """
        query = f"SELECT {_COLUMNS} FROM employees WHERE TRUE"
        params: list = []
        if job_id:
            query += " AND job_id = %s"
            params.append(job_id)
        if department_id is not None:
            query += " AND department_id = %s"
            params.append(department_id)
        query += " ORDER BY employee_id;"

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return [self._row_to_employee(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    # ── UPDATE ────────────────────────────────────────────

    def update_column(self, employee_id: int, column: str, value,
                      actor: Optional[str] = None) -> Optional[Employee]:
        """
        Set a single column of an employee row.

        The column name is quoted as an SQL identifier and must already have
        been checked against the update allow-list by the caller.

        Returns:
            The updated Employee, or None if no row has this id.
        """
        query = sql.SQL(
            "UPDATE employees SET {column} = %s WHERE employee_id = %s RETURNING " + _COLUMNS + ";"
        ).format(column=sql.Identifier(column))
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                set_actor(cur, actor)
                cur.execute(query, (value, employee_id))
                row = cur.fetchone()
            conn.commit()
            if row:
                logger.info(f"Employee #{employee_id}: {column} updated.")
            return self._row_to_employee(row) if row else None
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to update {column} of employee #{employee_id}: {e}")
            raise_translated(e)
        finally:
            release_connection(conn)

    def transfer(self, employee_id: int, new_department_id: Optional[int],
                 new_manager_id: Optional[int],
                 actor: Optional[str] = None) -> Optional[Transfer]:
        """
        Move an employee to another department and/or manager and record
        the move in transfer_history, atomically.

        The current department and manager are read under a row lock, so the
        history always holds the values the employee actually had.

        Returns:
            The recorded Transfer, or None if no row has this id.

        Raises:
            InvalidValueError: If nothing would change.
            HRError: On an unknown department or manager.
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                set_actor(cur, actor)
                cur.execute(
                    "SELECT department_id, manager_id FROM employees "
                    "WHERE employee_id = %s FOR UPDATE;",
                    (employee_id,),
                )
                current = cur.fetchone()
                if current is None:
                    conn.rollback()
                    return None

                old_department, old_manager = current
                if old_department == new_department_id and old_manager == new_manager_id:
                    raise InvalidValueError(
                        f"Employee #{employee_id} is already in department "
                        f"{new_department_id} under manager {new_manager_id}."
                    )

                cur.execute(
                    "UPDATE employees SET department_id = %s, manager_id = %s "
                    "WHERE employee_id = %s;",
                    (new_department_id, new_manager_id, employee_id),
                )
                cur.execute(
                    """
                    INSERT INTO transfer_history
                        (employee_id, old_department, new_department, old_manager, new_manager)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING id, transferred_by, transferred_at;
                    """,
                    (employee_id, old_department, new_department_id, old_manager, new_manager_id),
                )
                row = cur.fetchone()
            conn.commit()
            logger.info(
                f"Employee #{employee_id} transferred: dept {old_department} -> {new_department_id}, "
                f"manager {old_manager} -> {new_manager_id}"
            )
            return Transfer(
                employee_id=employee_id,
                old_department=old_department,
                new_department=new_department_id,
                old_manager=old_manager,
                new_manager=new_manager_id,
                id=row[0],
                transferred_by=row[1],
                transferred_at=row[2],
            )
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to transfer employee #{employee_id}: {e}")
            raise_translated(e)
        finally:
            release_connection(conn)

    def adjust_department_salaries(self, department_id: int, amount: Decimal,
                                   actor: Optional[str] = None) -> int:
        """
        Add `amount` to the salary of everyone in a department, in one statement.

        Every row goes through the salary trigger: one out-of-band result
        rejects the whole batch.

        Returns:
            Number of employees updated.
        """
        query = "UPDATE employees SET salary = salary + %s WHERE department_id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                set_actor(cur, actor)
                cur.execute(query, (amount, department_id))
                updated = cur.rowcount
            conn.commit()
            logger.info(f"Adjusted salary by {amount} for {updated} employee(s) in department {department_id}")
            return updated
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to adjust salaries in department {department_id}: {e}")
            raise_translated(e)
        finally:
            release_connection(conn)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, employee_id: int, actor: Optional[str] = None) -> Optional[Employee]:
        """
        Delete an employee. The deletion trigger writes the deletion log first.

        Returns:
            The deleted Employee, or None if no row has this id.
        """
        query = f"DELETE FROM employees WHERE employee_id = %s RETURNING {_COLUMNS};"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                set_actor(cur, actor)
                cur.execute(query, (employee_id,))
                row = cur.fetchone()
            conn.commit()
            if row:
                logger.info(f"Employee #{employee_id} deleted successfully.")
            return self._row_to_employee(row) if row else None
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to delete employee #{employee_id}: {e}")
            raise_translated(e)
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_employee(row: tuple) -> Employee:
        """Convert a database row tuple (in `_COLUMNS` order) to an Employee."""
        return Employee(
            id=row[0],
            first_name=row[1],
            last_name=row[2],
            email=row[3],
            phone_number=row[4],
            hire_date=row[5],
            job_id=row[6],
            salary=row[7],
            commission_pct=row[8],
            manager_id=row[9],
            department_id=row[10],
        )
