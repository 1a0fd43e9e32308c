"""
Core logic for turning shared videos into still frames.

This package is framework-agnostic - it doesn't import Slack's SDK,
httpx, FastAPI or FFmpeg bindings. Infrastructure adapters implement
the protocols defined in core.extraction.handler.
"""
