"""
Video Extractor - posts still frames from videos shared in Slack.

This package contains the complete service:
- core: Framework-agnostic event handling and sampling logic
- infrastructure: Slack, HTTP download and FFmpeg adapters
- api: Health endpoint and Slack event registration
- config: Application configuration
"""

__version__ = "1.0.0"
