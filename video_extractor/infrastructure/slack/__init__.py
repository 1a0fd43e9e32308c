"""
Slack integration.

Wraps the Web API client the Bolt app shares across events.
"""

from .client import SlackChatClient, SlackClientError

__all__ = ["SlackChatClient", "SlackClientError"]
