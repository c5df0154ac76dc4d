"""
Returns Alpha - Historical Returns Signal Model

A signal-generation engine that turns consolidated price bars for a tracked
universe of instruments into directional price signals, one per instrument
per closed bar, driven by a rate-of-change indicator over a lookback window.
"""

__version__ = "0.1.0"
__author__ = "Returns Alpha Team"
