"""Domain layer - Entities, value objects and pure services."""
