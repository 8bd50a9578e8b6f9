"""Rendering context construction."""
