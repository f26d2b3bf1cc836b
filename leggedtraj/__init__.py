"""Splines, node variables, gaits, terrain, dynamics, costs and constraints for legged-robot trajectory optimization."""

__version__ = "0.1.0"