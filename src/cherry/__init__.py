"""
Cherry: Todoist webhook receiver.

Verifies signed Todoist webhook callbacks, records them in a daily rotating
log file and acknowledges them. Ships a small client library for sending
the same signed requests.
"""

__version__ = "1.0.0"
