"""
Backend package for the chat functions.

This package provides the configuration and the storage, database, vision
and messaging clients the functions are wired to, along with in-memory
doubles for tests and local runs.
"""
