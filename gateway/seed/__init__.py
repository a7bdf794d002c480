from .seed import clear_database, seed_database, seed_status

__all__ = ["seed_database", "clear_database", "seed_status"]
