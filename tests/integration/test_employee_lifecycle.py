"""
End-to-end scenarios against PostgreSQL: hiring, updates, transfers and
removals, with the audit rows the triggers leave behind.
"""

from datetime import date
from decimal import Decimal

import pytest

from services.audit_service import AuditService
from services.employee_service import EmployeeService
from utils.exceptions import (
    ColumnNotAllowedError,
    DuplicateEmployeeError,
    EmployeeNotFoundError,
    InvalidDepartmentError,
    InvalidJobError,
    InvalidManagerError,
    InvalidValueError,
    SalaryOutOfRangeError,
)

ACTOR = "tg:42"
HIRED = date(2025, 4, 24)


@pytest.fixture
def service():
    return EmployeeService()


def _hire_john(service):
    return service.add_employee(
        first_name="John", last_name="Doe", email="john.doe@example.com",
        phone_number="1234567890", hire_date=HIRED, job_id="IT_PROG",
        salary=5000, department_id=10, actor=ACTOR,
    )


def _hire_mary(service, **overrides):
    fields = dict(
        first_name="Mary", last_name="Johnson", email="mary.johnson@example.com",
        phone_number="4445556666", hire_date=HIRED, job_id="SA_REP",
        salary=8000, commission_pct="0.2", department_id=20, actor=ACTOR,
    )
    fields.update(overrides)
    return service.add_employee(**fields)


def test_hire_writes_salary_history(service, query):
    john = _hire_john(service)

    assert john.id == 100
    assert query("SELECT old_salary, new_salary, changed_by FROM salary_history WHERE employee_id = %s",
                 (john.id,)) == [(None, Decimal("5000.00"), ACTOR)]


def test_duplicate_email_is_rejected(service, query):
    _hire_john(service)
    with pytest.raises(DuplicateEmployeeError) as info:
        _hire_mary(service, email="john.doe@example.com")

    assert info.value.field == "email"
    assert query("SELECT count(*) FROM employees") == [(1,)]


def test_duplicate_phone_is_rejected(service):
    _hire_john(service)
    with pytest.raises(DuplicateEmployeeError) as info:
        _hire_mary(service, phone_number="1234567890")
    assert info.value.field == "phone_number"


def test_unknown_job_is_rejected(service, query):
    with pytest.raises(InvalidJobError):
        _hire_mary(service, job_id="INVAL_JOB")
    assert query("SELECT count(*) FROM salary_history") == [(0,)]


def test_unknown_department_is_rejected_on_hire(service):
    with pytest.raises(InvalidDepartmentError):
        _hire_mary(service, department_id=999)


def test_salary_outside_band_is_rejected_on_hire(service):
    with pytest.raises(SalaryOutOfRangeError) as info:
        _hire_mary(service, salary=20000)
    assert "SA_REP" in info.value.message


def test_salary_update_is_audited(service, query):
    john = _hire_john(service)
    updated = service.update_employee(john.id, "SALARY", "6000", actor="tg:7")

    assert updated.salary == Decimal("6000.00")
    assert query(
        "SELECT old_salary, new_salary, changed_by FROM salary_history WHERE employee_id = %s ORDER BY id",
        (john.id,),
    ) == [(None, Decimal("5000.00"), ACTOR), (Decimal("5000.00"), Decimal("6000.00"), "tg:7")]


def test_out_of_band_update_changes_nothing(service, query):
    john = _hire_john(service)
    with pytest.raises(SalaryOutOfRangeError):
        service.update_employee(john.id, "SALARY", "15000")

    assert service.get_employee(john.id).salary == Decimal("5000.00")
    assert query("SELECT count(*) FROM salary_history") == [(1,)]


def test_job_change_is_checked_against_the_new_band(service, query):
    john = _hire_john(service)
    with pytest.raises(SalaryOutOfRangeError):
        service.update_employee(john.id, "JOB_ID", "AD_VP")
    assert service.get_employee(john.id).job_id == "IT_PROG"


def test_non_salary_update_writes_no_history(service, query):
    john = _hire_john(service)
    service.update_employee(john.id, "first_name", "Johnny")
    assert service.get_employee_fullname(john.id) == "Johnny Doe"
    assert query("SELECT count(*) FROM salary_history") == [(1,)]


def test_update_of_disallowed_column(service):
    john = _hire_john(service)
    with pytest.raises(ColumnNotAllowedError):
        service.update_employee(john.id, "EMPLOYEE_ID", "101")


def test_update_of_unknown_employee(service):
    with pytest.raises(EmployeeNotFoundError):
        service.update_employee(999, "FIRST_NAME", "Bob")


def test_self_manager_is_rejected(service):
    john = _hire_john(service)
    with pytest.raises(InvalidManagerError):
        service.update_employee(john.id, "MANAGER_ID", str(john.id))


def test_transfer_records_actual_previous_values(service, query):
    john = _hire_john(service)
    mary = _hire_mary(service)

    move = service.transfer_employee(john.id, 20, mary.id, actor="tg:7")

    assert (move.old_department, move.new_department) == (10, 20)
    assert (move.old_manager, move.new_manager) == (None, mary.id)
    assert move.transferred_by == "tg:7"
    employee = service.get_employee(john.id)
    assert (employee.department_id, employee.manager_id) == (20, mary.id)
    assert query("SELECT count(*) FROM transfer_history WHERE employee_id = %s", (john.id,)) == [(1,)]


def test_transfer_to_unknown_department_rolls_back(service, query):
    john = _hire_john(service)
    with pytest.raises(InvalidDepartmentError):
        service.transfer_employee(john.id, 999, None)

    assert service.get_employee(john.id).department_id == 10
    assert query("SELECT count(*) FROM transfer_history") == [(0,)]


def test_transfer_to_the_same_place_is_rejected(service):
    john = _hire_john(service)
    with pytest.raises(InvalidValueError):
        service.transfer_employee(john.id, 10, None)


def test_transfer_of_unknown_employee(service):
    with pytest.raises(EmployeeNotFoundError):
        service.transfer_employee(999, 20, None)


def test_delete_is_logged_and_outlives_the_row(service, query):
    john = _hire_john(service)
    removed = service.delete_employee(john.id, actor="tg:7")

    assert removed.full_name == "John Doe"
    assert service.get_employee_fullname(john.id) is None
    assert query(
        "SELECT full_name, job_id, department_id, salary, deleted_by FROM deletion_logs WHERE employee_id = %s",
        (john.id,),
    ) == [("John Doe", "IT_PROG", 10, Decimal("5000.00"), "tg:7")]


def test_delete_of_unknown_employee_logs_nothing(service, query):
    with pytest.raises(EmployeeNotFoundError):
        service.delete_employee(999)
    assert query("SELECT count(*) FROM deletion_logs") == [(0,)]


def test_deleting_a_manager_clears_the_reports_manager(service):
    john = _hire_john(service)
    mary = _hire_mary(service, manager_id=john.id)
    service.delete_employee(john.id)
    assert service.get_employee(mary.id).manager_id is None


def test_fullname(service):
    mary = _hire_mary(service)
    assert service.get_employee_fullname(mary.id) == "Mary Johnson"
    assert service.get_employee_fullname(1002) is None


def test_batch_hire_and_department_operations(service, query):
    for i in range(1, 101):
        service.add_employee(
            first_name=f"Employee{i}", last_name="Test", email=f"emp{i}@example.com",
            phone_number=f"555{i:07d}", hire_date=HIRED,
            job_id="IT_PROG" if i % 2 == 0 else "SA_REP",
            salary=6000 + i * 2, department_id=10 if i % 2 == 0 else 20,
        )

    programmers = service.list_employees(job_id="IT_PROG", department_id=10)
    assert len(programmers) == 50

    assert service.raise_department_salaries(10, 100, actor="tg:7") == 50
    assert query(
        "SELECT count(*) FROM salary_history WHERE old_salary IS NOT NULL AND changed_by = 'tg:7'"
    ) == [(50,)]
    assert service.get_employee(programmers[0].id).salary == programmers[0].salary + 100

    for employee in service.list_employees(department_id=20):
        service.delete_employee(employee.id)
    assert query("SELECT count(*) FROM deletion_logs WHERE department_id = 20") == [(50,)]


def test_department_raise_is_all_or_nothing(service, query):
    _hire_john(service)
    near_top = service.add_employee(
        first_name="Ada", last_name="King", email="ada@example.com", phone_number="1",
        hire_date=HIRED, job_id="IT_PROG", salary=9950, department_id=10,
    )
    with pytest.raises(SalaryOutOfRangeError):
        service.raise_department_salaries(10, 100)

    assert service.get_employee(near_top.id).salary == Decimal("9950.00")
    assert query("SELECT count(*) FROM salary_history WHERE old_salary IS NOT NULL") == [(0,)]


def test_audit_reports_read_the_trail(service):
    john = _hire_john(service)
    service.update_employee(john.id, "SALARY", "6000")
    service.transfer_employee(john.id, 20, None)

    audit = AuditService()
    assert "+1000.00 since hire" in audit.salary_history_report(john.id)
    assert "dept 10 → 20" in audit.transfer_report(john.id)

    service.delete_employee(john.id)
    # salary and transfer history go with the row, the deletion log stays
    assert "No salary history" in audit.salary_history_report(john.id)
    assert "John Doe" in audit.deletion_report(department_id=20)
    digest = audit.weekly_digest()
    assert "Deletions: 1" in digest
