"""
Schema setup against PostgreSQL: rerunning it on a live database, and the
batched audit reads behind the Excel export.
"""

from datetime import date

import pandas as pd

from db.init_db import create_tables, seed_reference_data
from repositories.audit_repo import AuditRepository
from services.employee_service import EmployeeService
from services.export_service import ExportService

_TRIGGERS = """
    SELECT tgname FROM pg_trigger
    WHERE tgrelid = 'employees'::regclass AND NOT tgisinternal
    ORDER BY tgname
"""


def _hire(service, n, salary, department_id):
    return service.add_employee(
        first_name=f"Employee{n}", last_name="Test", email=f"emp{n}@example.com",
        phone_number=f"555{n:07d}", hire_date=date(2025, 4, 24), job_id="IT_PROG",
        salary=salary, department_id=department_id,
    )


def test_schema_setup_can_run_again(query):
    triggers = query(_TRIGGERS)
    jobs = query("SELECT count(*) FROM jobs")
    departments = query("SELECT count(*) FROM departments")

    create_tables()
    seed_reference_data()

    assert query(_TRIGGERS) == triggers
    assert [name for (name,) in triggers] == ["employees_deletion_audit_trg", "employees_salary_audit_trg"]
    assert query("SELECT count(*) FROM jobs") == jobs == [(13,)]
    assert query("SELECT count(*) FROM departments") == departments == [(10,)]


def test_rerun_keeps_data_and_auditing(query):
    service = EmployeeService()
    employee = _hire(service, 1, 5000, 10)

    create_tables()
    seed_reference_data()

    service.update_employee(employee.id, "SALARY", "5500")
    assert query("SELECT count(*) FROM salary_history WHERE employee_id = %s", (employee.id,)) == [(2,)]


def test_batched_history_reads():
    service = EmployeeService()
    first = _hire(service, 1, 5000, 10)
    second = _hire(service, 2, 6000, 10)
    other = _hire(service, 3, 7000, 20)
    service.update_employee(first.id, "SALARY", "5100")
    service.transfer_employee(second.id, 20, None)

    repo = AuditRepository()
    history = repo.get_salary_history_for([first.id, second.id])
    assert [(c.employee_id, c.new_salary) for c in history] == [
        (first.id, 5000), (first.id, 5100), (second.id, 6000),
    ]
    assert [t.employee_id for t in repo.get_transfers_for([first.id, second.id, other.id])] == [second.id]
    assert repo.get_salary_history_for([]) == []


def test_excel_export_on_live_data():
    service = EmployeeService()
    first = _hire(service, 1, 5000, 10)
    _hire(service, 2, 6000, 20)
    service.update_employee(first.id, "SALARY", "5100")

    sheets = pd.read_excel(ExportService().export_employees_excel(department_id=10), sheet_name=None)

    assert list(sheets["Employees"]["employee_id"]) == [first.id]
    assert list(sheets["Salary history"]["new_salary"]) == [5000, 5100]
