"""Session, configuration and collaborator helpers."""
