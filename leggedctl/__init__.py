"""Whole-body control building blocks for legged robots: tasks, hierarchical QP, contact constraints, swing scheduling and hardware handles."""

__version__ = "0.1.0"