"""Terraform generation engine for infrastructure diagrams."""

__version__ = "0.1.0"
