"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- slack: Slack Web API client
- http: Authenticated file downloads
- video: FFmpeg frame sampling

These wrappers translate between external formats and our domain models.
"""
