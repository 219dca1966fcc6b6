"""Domain layer: entities, store protocols and use-case services."""
