
"""
Things 3 export.

- items.py: TaskItem tagged union (Todo) and the JSON/URL encoding
- bridge.py: install check, memo lookup, URL dispatch
"""
