"""Persistence: SQLAlchemy async engine, ORM models, repositories, migrations."""
