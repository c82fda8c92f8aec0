"""Domain layer: entities and exceptions. No framework or persistence imports."""
