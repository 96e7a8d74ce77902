"""
Google Sheets Service Module

Service account authentication and the worksheet gateway.
"""
from .auth import authenticate, load_service_account_info, SCOPES
from .client import SheetsClient

__all__ = ['SheetsClient', 'authenticate', 'load_service_account_info', 'SCOPES']
