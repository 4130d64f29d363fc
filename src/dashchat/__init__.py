"""
DashChat

Chat core of the internal dashboard backend.
"""
__version__ = "0.1.0"
