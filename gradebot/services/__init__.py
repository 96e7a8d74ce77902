"""
External Service Integrations

Usage:
    from gradebot.services.sheets import SheetsClient, authenticate
"""
from .sheets import SheetsClient, authenticate, load_service_account_info

__all__ = ['SheetsClient', 'authenticate', 'load_service_account_info']
