"""
TellCMG - turn a loan officer's spoken idea into a structured submission.
"""

__version__ = "1.0.0"
