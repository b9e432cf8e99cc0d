"""Attendance Engine package.

This package is organized by feature modules (attendance, exceptions, reports, ...)
with a thin Flask controller layer and service/repository layers underneath.
"""
