from .database import check_database_health, create_db_and_tables, get_db_session, get_engine

__all__ = ["check_database_health", "create_db_and_tables", "get_db_session", "get_engine"]
