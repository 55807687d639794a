"""Attendance & payroll reconciliation engine.

Feature modules (geofence, attendance, jobs, payroll, advances) sit behind
repository Protocols, with a thin Flask controller layer on top.
"""
