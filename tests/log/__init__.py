"""
Logging tests.

Maps to: strbuf/_logging.py
"""
