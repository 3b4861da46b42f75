"""hw — a homework toolkit for hackers."""
