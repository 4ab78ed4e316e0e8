"""Body configurations and their points of interest."""
