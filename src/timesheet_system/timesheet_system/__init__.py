"""Timesheet System package.

Weekly timesheet accounting and validation engine, organized by feature
modules (hours, absences, accounting, validations, ...) with a thin Flask
JSON controller layer over service/repository layers.
"""
