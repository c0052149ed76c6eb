# -*- coding: utf-8 -*-
# astersign/__init__.py
# Request signing for the Aster futures API

from .errors import AsterSignError, EncodingError, SigningError, InvariantViolation, ClockError, APIError
from .signing import (
    Credentials,
    AsterRequestSigner,
    NonceSource,
    build_signed_request,
    canonicalize,
    decode_tuple,
    encode_tuple,
    next_nonce,
    recover_signer,
    sign,
)

__version__ = "1.0.0"

__all__ = [
    'AsterSignError',
    'EncodingError',
    'SigningError',
    'InvariantViolation',
    'ClockError',
    'APIError',
    'Credentials',
    'AsterRequestSigner',
    'NonceSource',
    'build_signed_request',
    'canonicalize',
    'decode_tuple',
    'encode_tuple',
    'next_nonce',
    'recover_signer',
    'sign',
]
