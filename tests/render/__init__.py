"""
Rendering tests.

Tests for name resolution, anchors, declaration HTML, examples and the
Renderer facade.

Maps to: doclink/render/
"""
