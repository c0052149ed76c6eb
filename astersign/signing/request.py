# -*- coding: utf-8 -*-
# astersign/signing/request.py
# Builds a signed copy of a request template:
#   template -> deep copy + recvWindow/timestamp -> canonical text -> nonce
#   -> abi tuple -> signature -> copy + user/signer/signature/nonce

import copy
import time
from typing import Any, Callable, Dict, NamedTuple, Optional

from astersign.errors import EncodingError, SigningError
from astersign.signing.abi import encode_tuple
from astersign.signing.canonical import ParameterTree, canonicalize
from astersign.signing.nonce import NonceSource, default_nonce_source
from astersign.signing.signer import sign, signer_address
from astersign.utils.logger import setup_logger

DEFAULT_RECV_WINDOW = "50000"

RECV_WINDOW_KEY = 'recvWindow'
TIMESTAMP_KEY = 'timestamp'
USER_KEY = 'user'
SIGNER_KEY = 'signer'
SIGNATURE_KEY = 'signature'
NONCE_KEY = 'nonce'

# 这些字段只能由签名流程写入
RESERVED_KEYS = (USER_KEY, SIGNER_KEY, SIGNATURE_KEY, NONCE_KEY)

logger = setup_logger('astersign.signing')


class Credentials(NamedTuple):
    """
    账户凭证（只读）

    user: 主账户地址
    signer: 授权签名地址（API 钱包）
    private_key: signer 对应的私钥，仅在签名时使用，不会出现在 repr/日志中
    """
    user: str
    signer: str
    private_key: str

    def __repr__(self):
        return f"Credentials(user={self.user!r}, signer={self.signer!r}, private_key='***')"


def current_timestamp_ms() -> int:
    return time.time_ns() // 1_000_000


class AsterRequestSigner(object):
    """
    请求签名器

    持有不可变的凭证和签名策略（recvWindow、时钟偏移、nonce 来源），
    多个线程可以共享同一个实例。
    """

    def __init__(self, credentials: Credentials, recv_window: str = DEFAULT_RECV_WINDOW,
                 nonce_source: Optional[NonceSource] = None, time_offset_ms: int = 0,
                 time_func: Optional[Callable[[], int]] = None, check_signer: bool = True):
        """
        Args:
            credentials: 账户凭证
            recv_window: 请求有效窗口（毫秒，字符串形式写入参数）
            nonce_source: nonce 生成器，默认使用进程级实例
            time_offset_ms: 本地时钟相对服务器的偏移，签名时间戳 = 本地毫秒 - 偏移
            time_func: 返回当前毫秒时间戳的函数
            check_signer: 是否检查私钥与 signer 地址是否匹配（不匹配时只记录警告）
        """
        self.credentials = credentials
        self.recv_window = str(recv_window)
        self.nonce_source = nonce_source or default_nonce_source
        self.time_offset_ms = int(time_offset_ms)
        self._time_func = time_func or current_timestamp_ms

        if check_signer:
            self._check_signer()

    def _check_signer(self):
        credentials = self.credentials
        try:
            derived = signer_address(credentials.private_key)
        except SigningError:
            # 私钥问题在 sign() 时以 SigningError 抛出
            derived = None
        if derived is not None and derived.lower() != str(credentials.signer).lower():
            logger.warning("private key does not belong to signer %s (derived %s)",
                           credentials.signer, derived)

    def sign(self, template: Dict[str, ParameterTree], nonce: Optional[int] = None,
             timestamp: Optional[int] = None) -> Dict[str, Any]:
        """
        生成已签名的请求参数

        Args:
            template: 请求参数模板，不会被修改
            nonce: 指定 nonce（默认从 nonce 来源获取）
            timestamp: 指定毫秒时间戳（默认取当前时间减去偏移）

        Returns:
            dict: 新的参数字典，额外包含 recvWindow, timestamp, user, signer, signature, nonce

        Raises:
            EncodingError: 模板不是 dict、包含保留字段或无法规范化/编码
            SigningError: 私钥非法
            ClockError: nonce 时钟异常
        """
        if not isinstance(template, dict):
            raise EncodingError(f"params must be a mapping, got {type(template).__name__}")
        reserved = [key for key in RESERVED_KEYS if key in template]
        if reserved:
            raise EncodingError(f"params already contain signing fields: {reserved}")

        params = copy.deepcopy(template)
        if timestamp is None:
            timestamp = self._time_func() - self.time_offset_ms
        params[RECV_WINDOW_KEY] = self.recv_window
        params[TIMESTAMP_KEY] = str(timestamp)

        canonical_text = canonicalize(params)
        if nonce is None:
            nonce = self.nonce_source.next_nonce()
        packed = encode_tuple(canonical_text, self.credentials.user, self.credentials.signer, nonce)
        signature = sign(packed, self.credentials.private_key)

        params[USER_KEY] = self.credentials.user
        params[SIGNER_KEY] = self.credentials.signer
        params[SIGNATURE_KEY] = signature
        params[NONCE_KEY] = nonce

        logger.debug("signed request: user=%s signer=%s nonce=%d canonical_len=%d",
                     self.credentials.user, self.credentials.signer, nonce, len(canonical_text))
        return params


def build_signed_request(template: Dict[str, ParameterTree], credentials: Credentials,
                         **kwargs) -> Dict[str, Any]:
    """
    对模板签名的便捷函数

    每次调用都会新建 AsterRequestSigner，且默认不做私钥与 signer 的匹配检查；
    长期运行的调用方应复用同一个 AsterRequestSigner 实例。

    Args:
        template: 请求参数模板
        credentials: 账户凭证
        **kwargs: 透传给 AsterRequestSigner（recv_window, nonce_source, time_offset_ms, time_func, check_signer）

    Returns:
        dict: 已签名的参数副本
    """
    kwargs.setdefault('check_signer', False)
    return AsterRequestSigner(credentials, **kwargs).sign(template)
