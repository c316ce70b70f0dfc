"""Simulation state, physics and persistence, independent of pygame."""
