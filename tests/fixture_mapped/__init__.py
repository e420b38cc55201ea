"""Models declaring relationship() attributes instead of relation methods."""
