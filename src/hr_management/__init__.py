"""HR management core package.

This package is organized by feature modules (shifts, attendance, corrections,
hierarchy, ...) with a thin Flask controller layer on top of service and
repository layers.
"""
