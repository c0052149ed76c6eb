# -*- coding: utf-8 -*-
# tests/test_request.py
# 请求签名：模板不变、附加字段、签名可验证、错误传播

import copy
from concurrent.futures import ThreadPoolExecutor

import pytest

from astersign.errors import EncodingError, SigningError
from astersign.signing.abi import encode_tuple
from astersign.signing.canonical import canonicalize
from astersign.signing.nonce import NonceSource
from astersign.signing.request import (
    DEFAULT_RECV_WINDOW,
    AsterRequestSigner,
    Credentials,
    build_signed_request,
)
from astersign.signing.signer import recover_signer

from .conftest import SIGNER_ADDRESS, SIGNER_KEY, USER_ADDRESS

TEMPLATE = {'symbol': 'BTCUSDT', 'side': 'BUY', 'quantity': '1.5'}
SIGNING_FIELDS = ('user', 'signer', 'signature', 'nonce')


def _verify(signed):
    """去掉签名字段后重新编码，恢复出的地址应为 signer"""
    unsigned = {key: value for key, value in signed.items() if key not in SIGNING_FIELDS}
    packed = encode_tuple(canonicalize(unsigned), signed['user'], signed['signer'], signed['nonce'])
    return recover_signer(packed, signed['signature'])


def test_end_to_end_example(credentials):
    assert canonicalize(TEMPLATE) == '{"quantity":"1.5","side":"BUY","symbol":"BTCUSDT"}'

    signer = AsterRequestSigner(credentials)
    signed = signer.sign(TEMPLATE, nonce=1_700_000_000_000_000, timestamp=1_700_000_000_000)

    assert signed['symbol'] == 'BTCUSDT'
    assert signed['recvWindow'] == DEFAULT_RECV_WINDOW
    assert signed['timestamp'] == '1700000000000'
    assert signed['user'] == USER_ADDRESS
    assert signed['signer'] == SIGNER_ADDRESS
    assert signed['nonce'] == 1_700_000_000_000_000
    assert signed['signature'].startswith('0x') and len(signed['signature']) == 132
    assert int(signed['signature'][-2:], 16) in (27, 28)
    assert _verify(signed) == SIGNER_ADDRESS


def test_signed_text_covers_recv_window_and_timestamp(credentials):
    signed = AsterRequestSigner(credentials).sign(TEMPLATE, nonce=1, timestamp=1_700_000_000_000)
    tampered = dict(signed, timestamp='1700000000001')
    assert _verify(tampered) != SIGNER_ADDRESS


def test_template_not_modified(credentials):
    template = {'symbol': 'BTCUSDT', 'filters': {'a': [1, 2]}}
    snapshot = copy.deepcopy(template)
    signed = build_signed_request(template, credentials)
    assert template == snapshot
    signed['filters']['a'].append(3)
    assert template == snapshot


def test_same_template_twice_gets_new_nonce(credentials):
    signer = AsterRequestSigner(credentials, nonce_source=NonceSource(clock=lambda: 42))
    first = signer.sign(TEMPLATE, timestamp=1)
    second = signer.sign(TEMPLATE, timestamp=1)
    assert (first['nonce'], second['nonce']) == (42, 43)
    assert first['signature'] != second['signature']


def test_concurrent_signing(credentials):
    signer = AsterRequestSigner(credentials)
    snapshot = copy.deepcopy(TEMPLATE)
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: signer.sign(TEMPLATE), range(50)))
    assert TEMPLATE == snapshot
    assert len({result['nonce'] for result in results}) == 50
    assert all(_verify(result) == SIGNER_ADDRESS for result in results)


def test_time_offset_and_recv_window(credentials):
    signer = AsterRequestSigner(credentials, recv_window=5000, time_offset_ms=250,
                                time_func=lambda: 1_000_000)
    signed = signer.sign({})
    assert signed['recvWindow'] == '5000'
    assert signed['timestamp'] == '999750'


def test_existing_recv_window_and_timestamp_overwritten(credentials):
    signed = AsterRequestSigner(credentials).sign({'recvWindow': '1', 'timestamp': '2'}, timestamp=3)
    assert signed['recvWindow'] == DEFAULT_RECV_WINDOW
    assert signed['timestamp'] == '3'


def test_empty_template(credentials):
    signed = AsterRequestSigner(credentials).sign({}, nonce=7, timestamp=1)
    assert _verify(signed) == SIGNER_ADDRESS


@pytest.mark.parametrize('field', SIGNING_FIELDS)
def test_reserved_field_rejected(credentials, field):
    with pytest.raises(EncodingError):
        AsterRequestSigner(credentials).sign({'symbol': 'BTCUSDT', field: 'x'})


@pytest.mark.parametrize('template', [None, [('symbol', 'BTCUSDT')], 'symbol=BTCUSDT'])
def test_non_mapping_rejected(credentials, template):
    with pytest.raises(EncodingError):
        AsterRequestSigner(credentials).sign(template)


def test_unsupported_value_rejected(credentials):
    with pytest.raises(EncodingError):
        AsterRequestSigner(credentials).sign({'symbol': object()})


def test_bad_address_rejected():
    credentials = Credentials('0x1234', SIGNER_ADDRESS, SIGNER_KEY)
    with pytest.raises(EncodingError):
        AsterRequestSigner(credentials).sign(TEMPLATE)


def test_bad_key_propagates_and_template_untouched():
    credentials = Credentials(USER_ADDRESS, SIGNER_ADDRESS, '0xnothex')
    template = dict(TEMPLATE)
    with pytest.raises(SigningError):
        AsterRequestSigner(credentials).sign(template)
    assert template == TEMPLATE


def test_mismatched_signer_warns(caplog):
    credentials = Credentials(USER_ADDRESS, USER_ADDRESS, SIGNER_KEY)
    with caplog.at_level('WARNING', logger='astersign.signing'):
        AsterRequestSigner(credentials)
    assert 'does not belong to signer' in caplog.text
    assert SIGNER_KEY[2:] not in caplog.text


def test_credentials_repr_hides_key(credentials):
    text = repr(credentials)
    assert SIGNER_KEY[2:] not in text
    assert USER_ADDRESS in text
    assert SIGNER_KEY[2:] not in str(credentials)


def test_one_shot_helper_skips_signer_check(caplog):
    credentials = Credentials(USER_ADDRESS, USER_ADDRESS, SIGNER_KEY)
    with caplog.at_level('WARNING', logger='astersign.signing'):
        signed = build_signed_request(TEMPLATE, credentials)
        AsterRequestSigner(credentials, check_signer=False)
    assert 'does not belong to signer' not in caplog.text
    assert signed['signer'] == USER_ADDRESS
