"""
Utility functions module.

Time Semantics:
- Bar end times from the host are authoritative for indicator updates
- Slice time stamps every signal generated from that slice
- Wall-clock time is only used as a fallback when no slice time exists
"""
