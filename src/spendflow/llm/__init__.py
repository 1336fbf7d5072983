"""Remote insight module."""
from .remote_insights import RemoteInsightClient, parse_insight_response, SYSTEM_INSTRUCTION

__all__ = ["RemoteInsightClient", "parse_insight_response", "SYSTEM_INSTRUCTION"]
