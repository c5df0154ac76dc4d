"""
Market data models and parsing.

Bars and slices are the only market data the signal model sees; raw history
rows are parsed into bars before they reach an indicator.
"""
