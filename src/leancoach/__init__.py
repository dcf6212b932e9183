"""
Lean Coach

Multi-tenant A3 problem-solving workspace with an AI coach.
"""
__version__ = "0.1.0"
