"""Lifecycle primitives shared by fixtures."""
