"""Shift Attendance package.

Organized by feature modules (geofence, shifts, attendance, scheduler, ...)
with a thin Flask controller layer over service/repository layers. The
attendance ledger and the reconciliation scheduler are the core; everything
else feeds them.
"""
