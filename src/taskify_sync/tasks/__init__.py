"""
Task snapshot.

Components:
- task_models.py: data structures (TaskRecord, Language)
- snapshot_codec.py: tolerant JSON codec for the shared snapshot + pure list helpers
"""
