"""
Exception handling tests.

Tests for strbuf.exceptions and strbuf.status:
- Status code to Python exception mapping
- Status messages

Maps to: strbuf/exceptions/, strbuf/status.py
"""
