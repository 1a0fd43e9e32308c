"""
HTTP download of shared files.
"""

from .downloader import HttpVideoDownloader

__all__ = ["HttpVideoDownloader"]
