# -*- coding: utf-8 -*-
# astersign/signing/signer.py
# Keccak-256 digest + personal-message prefix + secp256k1 ECDSA signature.
#
# digest = keccak256("\x19Ethereum Signed Message:\n32" || keccak256(packed))
# signature = "0x" || r(32) || s(32) || v(1), v in {27, 28}

from typing import Union

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError
from web3 import Web3

from astersign.errors import InvariantViolation, SigningError

PERSONAL_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"
SIGNATURE_LENGTH = 65
RECOVERY_ID_OFFSET = 27


def keccak256(data: bytes) -> bytes:
    """Keccak-256（以太坊变体，不是 SHA3-256）"""
    return bytes(Web3.keccak(data))


def message_digest(packed: bytes) -> bytes:
    """
    计算最终被签名的 32 字节摘要

    Args:
        packed: encode_tuple 的输出

    Returns:
        bytes: keccak256(前缀 + "32" + keccak256(packed))
    """
    payload_hash = keccak256(packed)
    prefixed = PERSONAL_MESSAGE_PREFIX + str(len(payload_hash)).encode('ascii') + payload_hash
    return keccak256(prefixed)


def _load_private_key(private_key: Union[str, bytes]) -> keys.PrivateKey:
    if isinstance(private_key, str):
        hex_key = private_key[2:] if private_key[:2] in ('0x', '0X') else private_key
        try:
            key_bytes = bytes.fromhex(hex_key)
        except ValueError as exc:
            raise SigningError("invalid private key: not a hex string") from exc
    elif isinstance(private_key, bytes):
        key_bytes = private_key
    else:
        raise SigningError(f"invalid private key type: {type(private_key).__name__}")
    try:
        return keys.PrivateKey(key_bytes)
    except ValidationError as exc:
        raise SigningError(f"invalid private key: {exc}") from exc


def sign(packed: bytes, private_key: Union[str, bytes]) -> str:
    """
    对 ABI 编码结果签名

    Args:
        packed: encode_tuple 的输出
        private_key: 32 字节私钥（十六进制，可带 '0x'）

    Returns:
        str: '0x' + 130 位十六进制签名

    Raises:
        SigningError: 私钥非法或签名计算失败
        InvariantViolation: 签名长度不是 65 字节
    """
    key = _load_private_key(private_key)
    digest = message_digest(packed)
    try:
        signature = bytearray(key.sign_msg_hash(digest).to_bytes())
    except (BadSignature, ValidationError) as exc:
        raise SigningError(f"sign error: {exc}") from exc

    if len(signature) != SIGNATURE_LENGTH:
        raise InvariantViolation(f"unexpected signature length: {len(signature)}")
    # sign_msg_hash 的 v 为 0/1，验证方要求 27/28
    signature[64] += RECOVERY_ID_OFFSET
    return '0x' + signature.hex()


def signer_address(private_key: Union[str, bytes]) -> str:
    """私钥对应的 EIP-55 地址"""
    return _load_private_key(private_key).public_key.to_checksum_address()


def recover_signer(packed: bytes, signature: str) -> str:
    """
    从签名恢复签名者地址（校验用）

    Args:
        packed: encode_tuple 的输出
        signature: sign 的返回值

    Returns:
        str: EIP-55 地址

    Raises:
        SigningError: 签名格式非法或无法恢复公钥
    """
    hex_signature = signature[2:] if signature[:2] in ('0x', '0X') else signature
    try:
        signature_bytes = bytes.fromhex(hex_signature)
    except ValueError as exc:
        raise SigningError("invalid signature: not a hex string") from exc
    if len(signature_bytes) != SIGNATURE_LENGTH:
        raise SigningError(f"invalid signature length: {len(signature_bytes)}")

    message = encode_defunct(primitive=keccak256(packed))
    try:
        return Account.recover_message(message, signature=signature_bytes)
    except (BadSignature, ValidationError, ValueError) as exc:
        raise SigningError(f"signature recovery failed: {exc}") from exc
