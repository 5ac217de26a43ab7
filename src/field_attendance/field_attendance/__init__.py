"""Field Attendance package.

Feature modules (employees, holidays, attendance, roster) each expose a
domain model, a repository interface with a MySQL implementation, a service
and a thin Flask controller.
"""
