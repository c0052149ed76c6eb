# -*- coding: utf-8 -*-
# astersign/drivers/aster/user_stream.py
# Listen-key lifecycle for the user data stream. All three calls are signed.

LISTEN_KEY_PATH = '/fapi/v3/listenKey'


class UserStreamService(object):
    """用户数据流 listenKey 的创建、续期与关闭"""

    def __init__(self, client):
        self.c = client

    def start(self):
        """创建 listenKey，返回 listenKey 字符串"""
        data = self.c.call({'url': LISTEN_KEY_PATH, 'method': 'POST', 'params': {}}, sign=True)
        if not isinstance(data, dict) or not data.get('listenKey'):
            raise ValueError(f"unexpected listenKey response: {data!r}")
        return data['listenKey']

    def keepalive(self, listen_key):
        """续期 listenKey"""
        self.c.call({'url': LISTEN_KEY_PATH, 'method': 'POST', 'params': {'listenKey': listen_key}}, sign=True)

    def close(self, listen_key):
        """关闭 listenKey"""
        self.c.call({'url': LISTEN_KEY_PATH, 'method': 'DELETE', 'params': {'listenKey': listen_key}}, sign=True)
