"""
Core Business Logic
==================

Core business logic modules for icon resolution and diagram compilation.

Modules:
- icons: Icon index, URL extraction, resolution cascade and source rewriting
- compiler: d2 command-line compiler integration
"""
