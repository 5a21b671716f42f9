"""
CivicTrack core: domain errors and geo primitives.
"""
