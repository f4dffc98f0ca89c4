"""Math, component reflection, JSON writing, virtual files and profiling helpers for a 3D renderer."""

__version__ = "0.1.0"