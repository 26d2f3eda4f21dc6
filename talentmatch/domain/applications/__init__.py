"""
Application lifecycle domain.
"""
