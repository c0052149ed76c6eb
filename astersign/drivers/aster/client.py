# -*- coding: utf-8 -*-
# astersign/drivers/aster/client.py
# Thin Aster REST transport: signs a parameter set and puts it on the wire.
# POST -> form body; GET/DELETE -> flattened query string.

import copy
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from astersign.configs.account_reader import AccountReader
from astersign.configs.config_reader import AsterSettings, ConfigReader
from astersign.errors import APIError, EncodingError
from astersign.signing.canonical import canonicalize
from astersign.signing.nonce import NonceSource
from astersign.signing.request import AsterRequestSigner, Credentials
from astersign.utils.logger import setup_logger


def _scalar_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return canonicalize(value)


def flatten_params(prefix: str, value: Any, out: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
    """
    将嵌套参数递归展平成 query 参数

    dict 的键按字典序展开为 'a.b'，列表元素展开为 'a[0]'，None 被跳过，
    布尔值为 'true'/'false'，数字使用规范化文本

    Args:
        prefix: 当前键前缀，顶层为 ''
        value: 参数值
        out: 收集 (key, value) 的列表

    Returns:
        list: out 本身
    """
    if isinstance(value, dict):
        for key in sorted(value):
            flatten_params(f"{prefix}.{key}" if prefix else key, value[key], out)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            flatten_params(f"{prefix}[{index}]", item, out)
    elif value is not None:
        out.append((prefix, _scalar_text(value)))
    return out


def form_value(value: Any) -> str:
    """POST 表单字段值：字符串原样，其余使用规范化文本（嵌套结构为紧凑 JSON）"""
    return _scalar_text(value)


class AsterClient:
    """
    Aster REST 客户端

    只负责签名与传输，不解析具体接口的返回结构
    """

    def __init__(self, user: str, signer: str, private_key: str,
                 settings: Optional[AsterSettings] = None,
                 session: Optional[requests.Session] = None,
                 nonce_source: Optional[NonceSource] = None):
        """
        Args:
            user: 主账户地址
            signer: 授权签名地址
            private_key: signer 的私钥
            settings: 接入配置，默认 AsterSettings()
            session: 复用的 requests.Session
            nonce_source: nonce 生成器，默认使用进程级实例
        """
        self.credentials = Credentials(user, signer, private_key)
        self.settings = settings or AsterSettings()
        self.base_url = self.settings.api_endpoint
        self.logger = setup_logger('astersign.aster', logging.DEBUG if self.settings.debug else None)
        self.signer = AsterRequestSigner(
            self.credentials,
            recv_window=self.settings.recv_window,
            nonce_source=nonce_source,
            time_offset_ms=self.settings.time_offset_ms,
        )

        self.session = session or requests.Session()
        self.session.headers['User-Agent'] = self.settings.user_agent
        if self.settings.proxy:
            self.session.proxies.update({'http': self.settings.proxy, 'https': self.settings.proxy})

    def __repr__(self):
        return f"AsterClient(base_url={self.base_url!r}, user={self.credentials.user!r}, signer={self.credentials.signer!r})"

    def set_api_endpoint(self, url: str) -> 'AsterClient':
        """切换 REST 地址"""
        self.base_url = url
        return self

    def debug(self, msg, *args):
        if self.settings.debug:
            self.logger.debug(msg, *args)

    def call(self, api: Dict[str, Any], sign: bool = True) -> Any:
        """
        调用接口

        Args:
            api: {'url': '/fapi/v3/...', 'method': 'GET'|'POST'|'DELETE', 'params': {...}}
            sign: 是否签名（签名会在参数副本中加入 recvWindow, timestamp, user, signer, signature, nonce）

        Returns:
            解析后的 JSON，空响应返回 None，非 JSON 响应返回原始文本

        Raises:
            EncodingError / SigningError / ClockError: 签名失败（原样抛出）
            APIError: HTTP 状态码 >= 400
        """
        # 复制一份 params，以免修改调用方的模板
        template = api.get('params') or {}
        if not isinstance(template, dict):
            raise EncodingError(f"params must be a mapping, got {type(template).__name__}")
        params = self.signer.sign(template) if sign else copy.deepcopy(template)

        full_url = self.base_url.rstrip('/') + api.get('url', '')
        body, status_code = self.send(full_url, api.get('method', 'GET'), params)
        if status_code >= 400:
            raise self._api_error(body, status_code)
        return self._decode(body)

    def send(self, full_url: str, method: str, params: Dict[str, Any]) -> Tuple[str, int]:
        """
        发送 HTTP 请求

        Returns:
            tuple: (响应文本, HTTP 状态码)

        Raises:
            ValueError: 不支持的 HTTP 方法
        """
        method = method.upper()
        if method == 'POST':
            form = [(key, form_value(value)) for key, value in params.items()]
            self.debug("request: POST %s form_keys=%s", full_url, [key for key, _ in form])
            response = self.session.request(
                'POST', full_url, data=form,
                headers={'Content-Type': 'application/x-www-form-urlencoded'},
                timeout=self.settings.timeout,
            )
        elif method in ('GET', 'DELETE'):
            query = flatten_params('', params, [])
            self.debug("request: %s %s query_keys=%s", method, full_url, [key for key, _ in query])
            response = self.session.request(method, full_url, params=query, timeout=self.settings.timeout)
        else:
            raise ValueError(f"unsupported http method: {method}")

        self.debug("response status code: %d", response.status_code)
        self.debug("response body: %s", response.text)
        return response.text, response.status_code

    def _decode(self, body: str) -> Any:
        if not body or not body.strip():
            return None
        try:
            return json.loads(body)
        except ValueError:
            self.debug("response is not json, returning raw text")
            return body

    def _api_error(self, body: str, status_code: int) -> APIError:
        try:
            payload = json.loads(body)
        except ValueError as e:
            self.debug("failed to unmarshal json: %s", e)
            payload = None
        if isinstance(payload, dict):
            error = APIError(code=payload.get('code') or 0, message=payload.get('msg') or '',
                             status_code=status_code, response=body)
            if error.is_valid():
                return error
        return APIError(status_code=status_code, response=body)


def init_AsterClient(account_id: int = 0, config_dir: Optional[str] = None, show: bool = False,
                     session: Optional[requests.Session] = None) -> AsterClient:
    """
    初始化Aster客户端

    Args:
        account_id: 账户ID，根据 account.yaml 中 accounts.aster 下的账户顺序映射 (0=第一个账户, ...)
        config_dir: 配置目录，默认为 default_config_dir()
        show: 是否打印使用的账户和接入地址
        session: 复用的 requests.Session

    Returns:
        AsterClient: Aster客户端实例

    Raises:
        FileNotFoundError: account.yaml 不存在
        KeyError: 账户ID超出范围
        ValueError: 账户认证字段不完整
    """
    accounts = AccountReader(config_dir)
    account_name = accounts.get_account_name_by_id(account_id)
    credentials = accounts.get_credentials(account_name)
    settings = ConfigReader(config_dir).get_aster_settings()

    if show:
        print(f"使用Aster账户: {account_name} (ID: {account_id}) -> {settings.api_endpoint}")

    return AsterClient(credentials.user, credentials.signer, credentials.private_key,
                       settings=settings, session=session)
