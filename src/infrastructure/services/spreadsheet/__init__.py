from .google_sheets_client import GoogleSheetsClient, build_sheets_client

__all__ = ["GoogleSheetsClient", "build_sheets_client"]
