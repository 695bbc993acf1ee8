"""
Doc comment prose tests.

Tests for block segmentation, Links sections and inline linking.

Maps to: doclink/comment/
"""
