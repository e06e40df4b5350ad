"""apexlog command line interface."""
