"""
HTTP API layer
"""
