"""
harvest: a single-user task tracker driven by short text commands.

Tasks (to-dos, deadlines, events) live in an in-memory store and are
persisted to a flat pipe-delimited text file between runs.
"""

__version__ = "0.1.0"
