"""Simulation pipeline and run logging."""
