"""Generic async resource cache."""
