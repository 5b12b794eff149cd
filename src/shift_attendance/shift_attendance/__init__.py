"""Shift attendance package.

Organized by feature modules (schedules, punches, attendance, payroll, ...)
with a thin Flask controller layer over async service/repository layers.
"""
