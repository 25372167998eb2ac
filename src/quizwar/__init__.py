"""Quiz-driven strategy game engine."""
