"""
Durable shared store.

- shared_store.py: SQLite key/value store readable and writable from every context
"""
