"""
Configuration Management
=======================

Environment-based configuration using Pydantic Settings.

Components:
- settings: Icon directory, catalog URL and d2 compiler settings
- logging: Structured logging configuration
"""
