# -*- coding: utf-8 -*-
# astersign/signing/__init__.py
# Request-authentication pipeline: canonical text -> abi tuple -> secp256k1 signature

from .canonical import ParameterTree, canonicalize
from .nonce import NonceSource, next_nonce, default_nonce_source
from .abi import encode_tuple, decode_tuple
from .signer import sign, message_digest, recover_signer, signer_address
from .request import Credentials, AsterRequestSigner, build_signed_request, DEFAULT_RECV_WINDOW

__all__ = [
    'ParameterTree',
    'canonicalize',
    'NonceSource',
    'next_nonce',
    'default_nonce_source',
    'encode_tuple',
    'decode_tuple',
    'sign',
    'message_digest',
    'recover_signer',
    'signer_address',
    'Credentials',
    'AsterRequestSigner',
    'build_signed_request',
    'DEFAULT_RECV_WINDOW',
]
