"""Domain layer: entities, pure operations and collaborator interfaces."""
