"""Infrastructure: persistence and workflow engine services."""
