"""Core: configuration, lifespan, exception handlers, rate limiting."""
