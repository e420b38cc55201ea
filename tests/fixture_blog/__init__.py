"""Blog models using every kind of relation method."""
