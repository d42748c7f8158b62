"""Core infrastructure: errors, settings, XDG paths and theme."""
