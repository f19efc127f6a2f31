"""
Test suite for decimal-maxlength

Contains:
- tests/unit/          : Unit tests for individual modules (in-memory document binding)
"""
