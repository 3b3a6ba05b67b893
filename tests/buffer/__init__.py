"""
Buffer tests.

Maps to: strbuf/buffer.py, strbuf/_capacity.py, strbuf/_search.py
"""
