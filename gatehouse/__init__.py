"""
Gatehouse: access-control records and visitor risk scoring for a
residential community.
"""
__version__ = "1.0.0"
