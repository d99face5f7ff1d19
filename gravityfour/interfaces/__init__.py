"""
gravityfour.interfaces - User interfaces for Gravity Four

Only the command-line interface lives here.
"""

# Don't import anything here to avoid circular imports
__all__ = []
