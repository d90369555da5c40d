"""Compile CSS class styles into Roblox UI attributes."""

__version__ = "0.3.0"
