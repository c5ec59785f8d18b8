"""Mead tracker test suite.

- lib/: records, SQLite store, logging, retry and error types
- tui/: text editor, navigation, screen states, view transitions,
  dispatcher, key translation, rendering and settings
"""
