"""
Cross-process task snapshot sync between the app, its home-screen widget and
a detached push notification handler.
"""

__version__ = "0.1.0"
