"""
Slack integration.

This subpackage provides the Bolt app factory, the mention handler that
runs each conversational turn, and the Markdown to mrkdwn formatter.
"""

__all__ = [
    "app",
    "formatting",
    "mention_handler",
]
