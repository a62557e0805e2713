"""
shelf-steam - browse and launch games from a repository directory.
"""

__version__ = "0.1.0"
