"""Docking data structures and file I/O."""
