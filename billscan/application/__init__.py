"""Application workflows that orchestrate pure parsing and runtime services."""
