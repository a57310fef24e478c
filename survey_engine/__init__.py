"""
Engagement survey engine.

A resumable, multi-section survey wizard: a paginated Part A rating
questionnaire followed by Part B priority and action area selection, with
durable progress snapshots that expire after a retention window.
"""

__version__ = "0.1.0"
