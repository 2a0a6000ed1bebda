
"""Command surface and entrypoints (memo-manager, memo-import)."""
