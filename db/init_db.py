"""
db/init_db.py
-------------
Creates the HR schema (tables, sequences, indexes, audit triggers) if it
does not already exist, and optionally loads the standard jobs/departments.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Identity of whoever runs the current transaction (bot operator or DB role)
CREATE OR REPLACE FUNCTION hr_current_actor() RETURNS TEXT AS $$
    SELECT COALESCE(NULLIF(current_setting('hr.actor', true), ''), current_user::text);
$$ LANGUAGE sql STABLE;

-- Departments: organizational units employees belong to
CREATE TABLE IF NOT EXISTS departments (
    department_id   INTEGER PRIMARY KEY,
    department_name VARCHAR(30) NOT NULL,
    location        VARCHAR(50)
);

-- Jobs: job catalogue with the allowed salary band for each job
CREATE TABLE IF NOT EXISTS jobs (
    job_id      VARCHAR(10) PRIMARY KEY,
    job_title   VARCHAR(35) NOT NULL,
    min_salary  NUMERIC(10,2),
    max_salary  NUMERIC(10,2),
    CONSTRAINT ck_jobs_salary_band CHECK (min_salary IS NULL OR max_salary IS NULL OR min_salary <= max_salary)
);

-- Employees: core employee record; ids are handed out from 100 upwards
CREATE SEQUENCE IF NOT EXISTS employee_id_seq START WITH 100 INCREMENT BY 1;

CREATE TABLE IF NOT EXISTS employees (
    employee_id     INTEGER PRIMARY KEY DEFAULT nextval('employee_id_seq'),
    first_name      VARCHAR(50) NOT NULL,
    last_name       VARCHAR(50) NOT NULL,
    email           VARCHAR(100) NOT NULL,
    phone_number    VARCHAR(20) NOT NULL,
    hire_date       DATE NOT NULL,
    job_id          VARCHAR(10) NOT NULL,
    salary          NUMERIC(10,2) NOT NULL,
    commission_pct  NUMERIC(3,2),
    manager_id      INTEGER,
    department_id   INTEGER,
    CONSTRAINT uq_employees_email UNIQUE (email),
    CONSTRAINT uq_employees_phone UNIQUE (phone_number),
    CONSTRAINT ck_employees_salary CHECK (salary >= 0),
    CONSTRAINT ck_employees_commission CHECK (commission_pct BETWEEN 0 AND 1),
    CONSTRAINT ck_employees_not_own_manager CHECK (manager_id IS NULL OR manager_id <> employee_id),
    CONSTRAINT fk_employees_job FOREIGN KEY (job_id) REFERENCES jobs (job_id),
    CONSTRAINT fk_employees_manager FOREIGN KEY (manager_id)
        REFERENCES employees (employee_id) ON DELETE SET NULL,
    CONSTRAINT fk_employees_department FOREIGN KEY (department_id)
        REFERENCES departments (department_id)
);

ALTER SEQUENCE employee_id_seq OWNED BY employees.employee_id;

-- Salary history: one row per hire and per salary change
CREATE TABLE IF NOT EXISTS salary_history (
    id              SERIAL PRIMARY KEY,
    employee_id     INTEGER NOT NULL REFERENCES employees (employee_id) ON DELETE CASCADE,
    old_salary      NUMERIC(10,2),
    new_salary      NUMERIC(10,2) NOT NULL,
    changed_by      VARCHAR(64) NOT NULL DEFAULT hr_current_actor(),
    changed_at      TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

-- Deletion logs: snapshot of removed employees (kept after the row is gone)
CREATE TABLE IF NOT EXISTS deletion_logs (
    id              SERIAL PRIMARY KEY,
    employee_id     INTEGER NOT NULL,
    full_name       VARCHAR(101),
    job_id          VARCHAR(10),
    department_id   INTEGER,
    salary          NUMERIC(10,2),
    deleted_by      VARCHAR(64) NOT NULL DEFAULT hr_current_actor(),
    deleted_at      TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

-- Transfer history: department/manager moves
CREATE TABLE IF NOT EXISTS transfer_history (
    id              SERIAL PRIMARY KEY,
    employee_id     INTEGER NOT NULL REFERENCES employees (employee_id) ON DELETE CASCADE,
    old_department  INTEGER REFERENCES departments (department_id),
    new_department  INTEGER REFERENCES departments (department_id),
    old_manager     INTEGER REFERENCES employees (employee_id) ON DELETE SET NULL,
    new_manager     INTEGER REFERENCES employees (employee_id) ON DELETE SET NULL,
    transferred_by  VARCHAR(64) NOT NULL DEFAULT hr_current_actor(),
    transferred_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

-- Indexes for the common lookups
CREATE INDEX IF NOT EXISTS idx_employees_job_id ON employees (job_id);
CREATE INDEX IF NOT EXISTS idx_employees_department_id ON employees (department_id);
CREATE INDEX IF NOT EXISTS idx_salary_history_employee ON salary_history (employee_id, changed_at);
CREATE INDEX IF NOT EXISTS idx_transfer_history_employee ON transfer_history (employee_id, transferred_at);
CREATE INDEX IF NOT EXISTS idx_deletion_logs_department ON deletion_logs (department_id, deleted_at);

-- Salary validation against the job band + salary audit, on insert and on salary/job changes
CREATE OR REPLACE FUNCTION employees_salary_audit() RETURNS trigger AS $$
DECLARE
    v_min_salary jobs.min_salary%TYPE;
    v_max_salary jobs.max_salary%TYPE;
BEGIN
    SELECT min_salary, max_salary
      INTO v_min_salary, v_max_salary
      FROM jobs
     WHERE job_id = NEW.job_id;

    IF NOT FOUND THEN
        RAISE EXCEPTION 'Invalid job_id: %', NEW.job_id USING ERRCODE = 'HR002';
    END IF;

    IF NEW.salary < v_min_salary OR NEW.salary > v_max_salary THEN
        RAISE EXCEPTION 'Salary must be between % and % for job %',
            v_min_salary, v_max_salary, NEW.job_id USING ERRCODE = 'HR001';
    END IF;

    IF TG_OP = 'INSERT' THEN
        INSERT INTO salary_history (employee_id, old_salary, new_salary)
        VALUES (NEW.employee_id, NULL, NEW.salary);
    ELSIF NEW.salary IS DISTINCT FROM OLD.salary THEN
        INSERT INTO salary_history (employee_id, old_salary, new_salary)
        VALUES (NEW.employee_id, OLD.salary, NEW.salary);
    END IF;

    RETURN NULL;
END;
$$ LANGUAGE plpgsql;

DROP TRIGGER IF EXISTS employees_salary_audit_trg ON employees;
CREATE TRIGGER employees_salary_audit_trg
    AFTER INSERT OR UPDATE OF salary, job_id ON employees
    FOR EACH ROW EXECUTE FUNCTION employees_salary_audit();

-- Deletion audit, written before the row disappears
CREATE OR REPLACE FUNCTION employees_deletion_audit() RETURNS trigger AS $$
BEGIN
    INSERT INTO deletion_logs (employee_id, full_name, job_id, department_id, salary)
    VALUES (OLD.employee_id, OLD.first_name || ' ' || OLD.last_name,
            OLD.job_id, OLD.department_id, OLD.salary);
    RETURN OLD;
END;
$$ LANGUAGE plpgsql;

DROP TRIGGER IF EXISTS employees_deletion_audit_trg ON employees;
CREATE TRIGGER employees_deletion_audit_trg
    BEFORE DELETE ON employees
    FOR EACH ROW EXECUTE FUNCTION employees_deletion_audit();
"""

SEED_SQL = """
INSERT INTO departments (department_id, department_name, location) VALUES
    (10, 'Administration', 'Seattle'),
    (20, 'Marketing', 'Toronto'),
    (30, 'Purchasing', 'Seattle'),
    (40, 'Human Resources', 'London'),
    (50, 'Shipping', 'South San Francisco'),
    (60, 'IT', 'Southlake'),
    (80, 'Sales', 'Oxford'),
    (90, 'Executive', 'Seattle'),
    (100, 'Finance', 'Seattle'),
    (110, 'Accounting', 'Seattle')
ON CONFLICT (department_id) DO NOTHING;

INSERT INTO jobs (job_id, job_title, min_salary, max_salary) VALUES
    ('AD_PRES', 'President', 20080, 40000),
    ('AD_VP', 'Administration Vice President', 15000, 30000),
    ('AD_ASST', 'Administration Assistant', 3000, 6000),
    ('FI_MGR', 'Finance Manager', 8200, 16000),
    ('FI_ACCOUNT', 'Accountant', 4200, 9000),
    ('AC_MGR', 'Accounting Manager', 8200, 16000),
    ('SA_MAN', 'Sales Manager', 10000, 20080),
    ('SA_REP', 'Sales Representative', 6000, 12008),
    ('PU_CLERK', 'Purchasing Clerk', 2500, 5500),
    ('ST_CLERK', 'Stock Clerk', 2008, 5000),
    ('IT_PROG', 'Programmer', 4000, 10000),
    ('HR_REP', 'Human Resources Representative', 4000, 9000),
    ('MK_MAN', 'Marketing Manager', 9000, 15000)
ON CONFLICT (job_id) DO NOTHING;
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables, functions and triggers.
    Safe to call multiple times (IF NOT EXISTS / OR REPLACE everywhere).
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("HR schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        release_connection(conn)


def seed_reference_data() -> None:
    """Load the standard departments and job salary bands (existing rows are kept)."""
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SEED_SQL)
        conn.commit()
        logger.info("Reference data (departments, jobs) loaded.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to load reference data: {e}")
        raise
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    seed_reference_data()
    print("✅ HR schema created successfully.")
