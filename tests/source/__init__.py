"""
Source model tests.

Tests for module loading, declaration printing and literal trimming.

Maps to: doclink/source/
"""
