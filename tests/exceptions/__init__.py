"""
Exception hierarchy tests.

Maps to: doclink/exceptions/
"""
