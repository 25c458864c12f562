"""
Core infrastructure for the holiday tracker backend.
Provides persistence, exceptions, error handlers and logging setup.
"""
