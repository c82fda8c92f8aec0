"""Application layer: DTOs, ports (protocols) and pure workflow services."""
