"""
Inbound surfaces: the health endpoint and Slack event listeners.
"""
