"""
Generate Convex Auth secrets, write them to .env.local and sync them to Convex.
"""

__version__ = "0.1.0"
