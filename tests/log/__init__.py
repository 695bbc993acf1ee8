"""
Logging tests.

Maps to: doclink/_logging.py
"""
