"""
Test Suite
==========

Test suite matching the d2_icon_resolver/ package structure.

Test Categories:
- unit: Unit tests for individual components
- integration: Tests for the full extract, resolve and rewrite pipeline
"""
