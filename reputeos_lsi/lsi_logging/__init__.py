"""
Structured logging for ReputeOS LSI.

JSON logs with timestamp, client_id, event_type.
Use get_logger() in all modules for aggregation-friendly output; wrap
per-client work in client_context() so nested modules tag their events.
"""

from reputeos_lsi.lsi_logging.logger import bind_client, client_context, get_logger

__all__ = ["bind_client", "client_context", "get_logger"]
