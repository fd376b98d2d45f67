"""
App-side view of the shared snapshot.

- task_sync.py: whole-snapshot writes from the app + widget completion pickup
"""
