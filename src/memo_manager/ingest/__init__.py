
"""Memo ingestion: transcribe new audio files, label unlabelled memos."""
