"""
Data Models
===========

Pydantic data models for resolution diagnostics and compiler results.

Models:
- schemas: Rewrite results, diagnostics and d2 compile options
"""
