"""
Core architecture components for the Vibe Bites backend
"""
