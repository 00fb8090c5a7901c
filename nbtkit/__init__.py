"""Decode, encode and build NBT values, and render top-down map colours from blocks."""

__version__ = "0.1.0"