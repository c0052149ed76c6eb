# -*- coding: utf-8 -*-
# astersign/signing/abi.py
# Contract-ABI encoding of the signed tuple (string, address, address, uint256).
#
# Layout (fixed wire contract with the verifier):
#   head: [offset of string = 0x80][user, left-padded][signer, left-padded][nonce, uint256 big-endian]
#   tail: [len(utf8 text)][utf8 text right-padded to a 32-byte boundary]

from typing import Tuple

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError as AbiEncodingError
from eth_utils import is_hex_address, to_canonical_address, to_checksum_address

from astersign.errors import EncodingError
from astersign.signing.nonce import MAX_NONCE

TUPLE_TYPES = ['string', 'address', 'address', 'uint256']


def address_bytes(address: str) -> bytes:
    """
    将十六进制地址转换为 20 字节

    Args:
        address: '0x' 前缀或裸 40 位十六进制地址，大小写不敏感

    Raises:
        EncodingError: 地址格式非法
    """
    if not isinstance(address, str) or not is_hex_address(address):
        raise EncodingError(f"malformed address: {address!r}")
    return to_canonical_address(address)


def encode_tuple(canonical_text: str, user: str, signer: str, nonce: int) -> bytes:
    """
    按 ABI 编码 (canonical_text, user, signer, nonce)

    Args:
        canonical_text: 规范化后的参数文本
        user: 主账户地址
        signer: 授权签名地址
        nonce: 64 位无符号整数

    Returns:
        bytes: 编码结果，长度为 32 的整数倍

    Raises:
        EncodingError: 地址非法、nonce 越界或 ABI 编码失败
    """
    if not isinstance(canonical_text, str):
        raise EncodingError(f"canonical text must be str, got {type(canonical_text).__name__}")
    if isinstance(nonce, bool) or not isinstance(nonce, int) or not 0 <= nonce <= MAX_NONCE:
        raise EncodingError(f"nonce must be an unsigned 64-bit integer, got {nonce!r}")
    user_bytes = address_bytes(user)
    signer_bytes = address_bytes(signer)
    try:
        return encode(TUPLE_TYPES, [canonical_text, user_bytes, signer_bytes, nonce])
    except AbiEncodingError as exc:
        raise EncodingError(f"abi pack error: {exc}") from exc


def decode_tuple(data: bytes) -> Tuple[str, str, str, int]:
    """
    解码 encode_tuple 的结果

    Returns:
        tuple: (canonical_text, user, signer, nonce)，地址为 EIP-55 校验和格式

    Raises:
        EncodingError: 数据不是合法的 (string, address, address, uint256) 编码
    """
    try:
        text, user, signer, nonce = decode(TUPLE_TYPES, bytes(data))
    except (DecodingError, ValueError) as exc:
        raise EncodingError(f"abi unpack error: {exc}") from exc
    return text, to_checksum_address(user), to_checksum_address(signer), nonce
