"""
HTTP service for hole generation and scoring.
"""

from .api import create_app, main
from .preview import render_preview, preview_to_base64

__all__ = ["create_app", "main", "render_preview", "preview_to_base64"]
