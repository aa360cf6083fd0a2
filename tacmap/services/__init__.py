"""Stateless services built on the generation engine."""
