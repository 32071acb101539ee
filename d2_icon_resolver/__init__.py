"""
D2 Icon Resolver
================

Offline icon resolution for D2 diagrams. References to the remote
icons.terrastruct.com catalog are rewritten to local SVG assets before
the source is handed to the d2 compiler.

This package provides:
- A lazily built index over a local icon directory
- A layered fuzzy-matching resolver for malformed icon URLs
- A source rewriter that reports resolution diagnostics
- A thin async wrapper around the d2 command-line compiler
"""

__version__ = "1.0.0"
__author__ = "D2 Icon Resolver Team"
