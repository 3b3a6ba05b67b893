"""
Memory and allocator tests.

Maps to: strbuf/allocator.py
"""
