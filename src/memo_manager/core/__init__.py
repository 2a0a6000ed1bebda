
"""
Composition objects shared by the front-ends.

- ports.py: Protocols for URL opener, process spawner, transcriber, labeller
- state.py: AppState (settings + the one MemoStore and its borrowers)
"""
