"""
Companion - Guided Self-Help Session Engine

This package provides the session orchestration and decision engine
for a guided self-help conversation: emotional-state tracking, crisis
screening, and intervention selection.

IMPORTANT: This is a safety-critical system. Crisis screening runs
before any other processing of user input.
"""

__version__ = "0.1.0"
__author__ = "Companion Engineering Team"
