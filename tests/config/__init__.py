"""
Configuration tests.

Maps to: strbuf/config.py
"""
