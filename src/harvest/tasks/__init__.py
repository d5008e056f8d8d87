"""
Task subsystem.

Components:
- task_errors.py: typed errors and Ok/Err result values
- task_models.py: data structures (Task, TaskKind, payload variants) + record grammar
- task_store.py: in-memory ordered store with add/mark/unmark/delete/find
- task_codec.py: full-file save/load of the pipe-delimited record format
"""
