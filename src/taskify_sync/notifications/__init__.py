"""
Push notification intake.

- intake.py: payload parsing, background display, click -> focus/open app
"""
