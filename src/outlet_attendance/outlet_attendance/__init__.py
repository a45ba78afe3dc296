"""Outlet Attendance package.

Feature modules (geofence, sessions, guards, attendance, progress, ...) with a
thin Flask controller layer over service/repository layers.
"""
