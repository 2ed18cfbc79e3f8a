"""View-state layer for the folklore archive browser."""
