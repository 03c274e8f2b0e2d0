"""Reader engine packages."""
