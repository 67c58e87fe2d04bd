"""
Arcade Invaders
"""

__version__ = "0.1.0"
