"""Glowworm Swarm Optimization for protein-protein and protein-DNA docking refinement."""

__version__ = "0.1.0"
