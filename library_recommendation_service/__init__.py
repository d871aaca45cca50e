"""Movie recommendation categories for a media library."""
