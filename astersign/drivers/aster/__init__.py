# -*- coding: utf-8 -*-
# astersign/drivers/aster/__init__.py
# Aster futures REST transport package

from .client import AsterClient, init_AsterClient, flatten_params, form_value
from .user_stream import UserStreamService, LISTEN_KEY_PATH

__all__ = [
    'AsterClient',
    'init_AsterClient',
    'flatten_params',
    'form_value',
    'UserStreamService',
    'LISTEN_KEY_PATH',
]
