"""Core application plumbing."""
