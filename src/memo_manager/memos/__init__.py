
"""
Memo records.

Components:
- models.py: Memo record + the "unknown" label sentinel
- store.py: the single shared SQLite connection, guarded by one lock
- merge.py: combine several memos into one
"""
