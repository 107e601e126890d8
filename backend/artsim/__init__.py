"""Artist similarity graph engine."""
