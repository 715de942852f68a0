"""Infrastructure adapters: database, repositories, logging."""
