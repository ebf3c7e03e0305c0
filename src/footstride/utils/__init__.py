"""General utilities used across footstride."""
