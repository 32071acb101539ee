"""
D2 Compiler Module
==================

Integration with the external d2 command-line compiler.

Components:
- d2_cli: Async subprocess wrapper that resolves icons before compiling
"""
