"""
API middlewares
"""
