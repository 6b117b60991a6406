"""Built-in commands. Each module registers its commands on import."""
