# -*- coding: utf-8 -*-
# astersign/configs/__init__.py

from .account_reader import AccountReader, account_reader, get_aster_credentials, get_credentials, list_accounts, is_account_valid
from .config_reader import AsterSettings, ConfigReader, config_reader, get_aster_settings, BASE_API_MAIN_URL, BASE_API_TESTNET_URL

__all__ = [
    'AccountReader',
    'account_reader',
    'get_aster_credentials',
    'get_credentials',
    'list_accounts',
    'is_account_valid',
    'AsterSettings',
    'ConfigReader',
    'config_reader',
    'get_aster_settings',
    'BASE_API_MAIN_URL',
    'BASE_API_TESTNET_URL',
]
