"""
repositories/org_repo.py
------------------------
Data access layer for the reference tables: jobs and departments.
"""


from db.connection import get_connection, release_connection
from models.organization import Department, Job
from utils.logger import get_logger

logger = get_logger(__name__)


class JobRepository:
    """Read access to the jobs catalogue."""

    def get_all(self) -> list[Job]:
        sql = "SELECT job_id, job_title, min_salary, max_salary FROM jobs ORDER BY job_id;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [Job(*r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_salary_spread(self) -> list[dict]:
        """
        Salary band and actual salary spread per job (jobs without staff included).

        Returns:
            List of dicts: [{'job_id', 'min_salary', 'max_salary',
            'lowest', 'highest', 'headcount'}, ...]
        """
        sql = """
            SELECT j.job_id, j.min_salary, j.max_salary,
                   MIN(e.salary), MAX(e.salary), COUNT(e.employee_id)
            FROM jobs j
            LEFT JOIN employees e ON e.job_id = j.job_id
            GROUP BY j.job_id, j.min_salary, j.max_salary
            ORDER BY j.job_id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [
                    {
                        "job_id": r[0],
                        "min_salary": r[1],
                        "max_salary": r[2],
                        "lowest": r[3],
                        "highest": r[4],
                        "headcount": r[5],
                    }
                    for r in cur.fetchall()
                ]
        finally:
            release_connection(conn)


class DepartmentRepository:
    """Read access to departments and per-department aggregates."""

    def get_all(self) -> list[Department]:
        sql = "SELECT department_id, department_name, location FROM departments ORDER BY department_id;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [Department(*r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_payroll_summary(self) -> list[dict]:
        """
        Headcount and total salary per department, largest payroll first.
        Employees without a department are grouped under department None.

        Returns:
            List of dicts: [{'department_id', 'department_name', 'headcount', 'payroll'}, ...]
        """
        sql = """
            SELECT e.department_id, d.department_name, COUNT(*), SUM(e.salary)
            FROM employees e
            LEFT JOIN departments d ON d.department_id = e.department_id
            GROUP BY e.department_id, d.department_name
            ORDER BY SUM(e.salary) DESC;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [
                    {
                        "department_id": r[0],
                        "department_name": r[1],
                        "headcount": r[2],
                        "payroll": r[3],
                    }
                    for r in cur.fetchall()
                ]
        finally:
            release_connection(conn)
