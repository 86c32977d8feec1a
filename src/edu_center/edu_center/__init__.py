"""Edu Center package.

Recurring lesson scheduling and attendance for an educational center,
organized by feature modules (lessons, attendance) with a thin Flask
controller layer over service/repository layers.
"""
