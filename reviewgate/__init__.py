"""Reviewgate: decide when and how broadly to run an AI review on a pull request."""

__version__ = "0.1.0"
