"""
Woodlands Checkpoint - Discord bot for verifying students against a school roster.

This package provides roster matching, per-guild role configuration, and the
discord.py adapter that assigns verified, grade and pronoun roles.
"""

__version__ = "0.1.0"
