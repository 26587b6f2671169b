"""initial compliance reports schema (users/rbac, masters, employees, payroll, loans, 2316)

Revision ID: a1f0c2d3e4b5
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1f0c2d3e4b5'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _money(name):
    return sa.Column(name, sa.Numeric(14, 2), nullable=True)


def upgrade() -> None:
    # ---- auth / rbac ----
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'roles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=50), nullable=False, unique=True),
    )
    op.create_table(
        'user_roles',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id', ondelete='CASCADE'), primary_key=True),
    )

    # ---- masters ----
    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=50), nullable=False, unique=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('business_info', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_table(
        'departments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('company_id', 'name', name='uq_department_company_name'),
    )
    op.create_table(
        'positions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('department_id', sa.Integer(), sa.ForeignKey('departments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(length=120), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    # ---- employees ----
    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('department_id', sa.Integer(), sa.ForeignKey('departments.id', ondelete='RESTRICT'), nullable=True),
        sa.Column('position_id', sa.Integer(), sa.ForeignKey('positions.id', ondelete='RESTRICT'), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, unique=True),
        sa.Column('employee_number', sa.String(length=32), nullable=False),
        sa.Column('first_name', sa.String(length=80), nullable=False),
        sa.Column('middle_name', sa.String(length=80), nullable=True),
        sa.Column('last_name', sa.String(length=80), nullable=False),
        sa.Column('suffix', sa.String(length=10), nullable=True),
        sa.Column('tin', sa.String(length=20), nullable=True),
        sa.Column('sss_number', sa.String(length=20), nullable=True),
        sa.Column('philhealth_number', sa.String(length=20), nullable=True),
        sa.Column('pagibig_number', sa.String(length=20), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('gender', sa.String(length=10), nullable=True),
        sa.Column('civil_status', sa.String(length=20), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('address', sa.JSON(), nullable=True),
        sa.Column('hire_date', sa.Date(), nullable=True),
        sa.Column('termination_date', sa.Date(), nullable=True),
        sa.Column('employment_status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('basic_salary', sa.Numeric(14, 2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('company_id', 'employee_number', name='uq_employee_company_number'),
    )
    op.create_index('ix_emp_company_id', 'employees', ['company_id'], unique=False)
    op.create_index('ix_emp_dept_id', 'employees', ['department_id'], unique=False)
    op.create_index('ix_emp_last_name', 'employees', ['last_name'], unique=False)

    # ---- payroll ----
    op.create_table(
        'payroll_periods',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id'), nullable=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('cutoff_start', sa.Date(), nullable=False),
        sa.Column('cutoff_end', sa.Date(), nullable=False),
        sa.Column('pay_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_payroll_periods_company_id', 'payroll_periods', ['company_id'], unique=False)
    op.create_index('ix_payroll_periods_cutoff_start', 'payroll_periods', ['cutoff_start'], unique=False)

    entry_status = sa.Enum('draft', 'approved', 'paid', 'voided', name='payroll_entry_status_enum')
    op.create_table(
        'payroll_entries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('payroll_period_id', sa.Integer(), sa.ForeignKey('payroll_periods.id'), nullable=False),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('employee_name', sa.String(length=255), nullable=True),
        _money('basic_pay'),
        _money('overtime_pay'),
        _money('holiday_pay'),
        _money('night_differential'),
        _money('thirteenth_month_pay'),
        _money('de_minimis'),
        _money('other_earnings'),
        _money('gross_pay'),
        _money('sss_employee'),
        _money('sss_employer'),
        _money('sss_ec'),
        _money('philhealth_employee'),
        _money('philhealth_employer'),
        _money('pagibig_employee'),
        _money('pagibig_employer'),
        _money('withholding_tax'),
        _money('net_pay'),
        sa.Column('status', entry_status, nullable=False, server_default='draft'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('payroll_period_id', 'employee_id', name='uq_payroll_entry_period_employee'),
    )
    op.create_index('ix_payroll_entries_payroll_period_id', 'payroll_entries', ['payroll_period_id'], unique=False)
    op.create_index('ix_payroll_entries_employee_id', 'payroll_entries', ['employee_id'], unique=False)
    op.create_index('ix_payroll_entry_status', 'payroll_entries', ['status'], unique=False)

    # ---- loans ----
    op.create_table(
        'employee_loans',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('loan_type', sa.String(length=40), nullable=False),
        sa.Column('reference_number', sa.String(length=64), nullable=True),
        _money('principal_amount'),
        _money('total_amount'),
        _money('monthly_amortization'),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_employee_loans_employee_id', 'employee_loans', ['employee_id'], unique=False)
    op.create_index('ix_employee_loans_loan_type', 'employee_loans', ['loan_type'], unique=False)

    op.create_table(
        'loan_payments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_loan_id', sa.Integer(), sa.ForeignKey('employee_loans.id'), nullable=False),
        sa.Column('payroll_entry_id', sa.Integer(), sa.ForeignKey('payroll_entries.id'), nullable=True),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('amount', sa.Numeric(14, 2), nullable=False, server_default='0'),
        _money('balance_after'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_loan_payments_employee_loan_id', 'loan_payments', ['employee_loan_id'], unique=False)
    op.create_index('ix_loan_payments_payment_date', 'loan_payments', ['payment_date'], unique=False)

    # ---- BIR 2316 snapshots ----
    op.create_table(
        'bir_2316_certificates',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('tax_year', sa.Integer(), nullable=False),
        sa.Column('compensation_data', sa.JSON(), nullable=False),
        sa.Column('generated_at', sa.DateTime(), nullable=False),
        sa.Column('generated_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.UniqueConstraint('employee_id', 'tax_year', name='uq_bir2316_employee_year'),
    )


def downgrade() -> None:
    op.drop_table('bir_2316_certificates')
    op.drop_index('ix_loan_payments_payment_date', table_name='loan_payments')
    op.drop_index('ix_loan_payments_employee_loan_id', table_name='loan_payments')
    op.drop_table('loan_payments')
    op.drop_index('ix_employee_loans_loan_type', table_name='employee_loans')
    op.drop_index('ix_employee_loans_employee_id', table_name='employee_loans')
    op.drop_table('employee_loans')
    op.drop_index('ix_payroll_entry_status', table_name='payroll_entries')
    op.drop_index('ix_payroll_entries_employee_id', table_name='payroll_entries')
    op.drop_index('ix_payroll_entries_payroll_period_id', table_name='payroll_entries')
    op.drop_table('payroll_entries')
    sa.Enum(name='payroll_entry_status_enum').drop(op.get_bind(), checkfirst=True)
    op.drop_index('ix_payroll_periods_cutoff_start', table_name='payroll_periods')
    op.drop_index('ix_payroll_periods_company_id', table_name='payroll_periods')
    op.drop_table('payroll_periods')
    op.drop_index('ix_emp_last_name', table_name='employees')
    op.drop_index('ix_emp_dept_id', table_name='employees')
    op.drop_index('ix_emp_company_id', table_name='employees')
    op.drop_table('employees')
    op.drop_table('positions')
    op.drop_table('departments')
    op.drop_table('companies')
    op.drop_table('user_roles')
    op.drop_table('roles')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
