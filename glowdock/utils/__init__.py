"""Geometry, quaternion and logging utilities."""
