"""Kernel – error hierarchy and clock."""
