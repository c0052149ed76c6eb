# -*- coding: utf-8 -*-
# tests/conftest.py
# 公共测试数据：开发用私钥（公开的测试助记词派生，切勿用于真实资金）与假 HTTP 会话

import pytest
from eth_account import Account

from astersign.signing.request import Credentials

USER_ADDRESS = '0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266'
SIGNER_KEY = '0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d'
SIGNER_ADDRESS = Account.from_key(SIGNER_KEY).address


class FakeResponse(object):
    def __init__(self, status_code=200, text='{}'):
        self.status_code = status_code
        self.text = text


class FakeSession(object):
    """记录请求参数并按顺序返回预设响应的 requests.Session 替身"""

    def __init__(self, responses=None):
        self.headers = {}
        self.proxies = {}
        self.calls = []
        self._responses = list(responses or [])

    def request(self, method, url, **kwargs):
        self.calls.append({'method': method, 'url': url, **kwargs})
        if self._responses:
            return self._responses.pop(0)
        return FakeResponse()


@pytest.fixture(autouse=True)
def clear_aster_env(monkeypatch):
    for name in ('ASTER_USER', 'ASTER_SIGNER', 'ASTER_PRIVATE_KEY', 'ASTER_BASE_URL', 'ASTERSIGN_CONFIG_DIR'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def credentials():
    return Credentials(USER_ADDRESS, SIGNER_ADDRESS, SIGNER_KEY)
