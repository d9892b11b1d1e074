"""
Core application utilities for settings, logging and FastAPI dependencies.

This package provides:
- Application-level settings (separate from DB settings)
- Structured logging configuration with correlation context
- Dependency helpers (request-scoped session and services)
"""
