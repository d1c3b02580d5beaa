"""Multiplay source tree."""
