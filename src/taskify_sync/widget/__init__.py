"""
Home-screen widget side.

Components:
- actions.py: intents, tap targets and the closed command set they decode into
- view.py: bounded view model derived from the snapshot
- strings.py: localized widget / notification text with per-locale plural rules
- renderer.py: reads the store and draws views into placed surfaces
- relay.py: handles completion taps and refresh broadcasts
- refresh_loop.py: scheduled refresh standing in for the host's update cycle
"""
