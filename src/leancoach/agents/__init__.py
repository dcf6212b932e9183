"""
Lean Coach Agent

LangChain-based coach used for AI chat responses.
"""
from .coach import CoachAgent
from .result import AgentResult

__all__ = ['CoachAgent', 'AgentResult']
