"""
Agent Result

Result returned by the coach agent.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class AgentResult:
    """Result from a coach agent run"""
    content: str                                        # Final text response
    model: str = ""                                     # Model used
    tokens_used: int = 0
    finish_reason: str = "stop"                         # stop, error
    error: Optional[str] = None                         # Error message if failed
