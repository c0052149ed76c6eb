# -*- coding: utf-8 -*-
# tests/test_canonical.py
# 规范化文本：排序、转义、数字格式与错误类型

import math
import random
from decimal import Decimal
from enum import IntEnum

import pytest

from astersign.errors import EncodingError
from astersign.signing.canonical import canonicalize


def test_insertion_order_does_not_matter():
    """相同键值对的任意插入顺序得到相同文本"""
    pairs = [('symbol', 'BTCUSDT'), ('side', 'BUY'), ('quantity', '1.5'), ('type', 'LIMIT'), ('price', '65000')]
    expected = canonicalize(dict(pairs))
    rng = random.Random(7)
    for _ in range(20):
        shuffled = pairs[:]
        rng.shuffle(shuffled)
        assert canonicalize(dict(shuffled)) == expected


def test_example_order():
    assert canonicalize({'symbol': 'BTCUSDT', 'side': 'BUY', 'quantity': '1.5'}) == \
        '{"quantity":"1.5","side":"BUY","symbol":"BTCUSDT"}'


def test_nested_keys_sorted_sequences_kept():
    tree = {'b': {'y': 1, 'x': [3, 1, 2]}, 'a': [{'k2': True, 'k1': None}]}
    assert canonicalize(tree) == '{"a":[{"k1":null,"k2":true}],"b":{"x":[3,1,2],"y":1}}'


def test_keys_sorted_by_code_point():
    assert canonicalize({'b': 1, 'B': 2, 'a': 3, '_': 4}) == '{"B":2,"_":4,"a":3,"b":1}'


def test_null_differs_from_absent():
    assert canonicalize({'a': 1}) != canonicalize({'a': 1, 'b': None})
    assert canonicalize({'a': 1, 'b': None}) == '{"a":1,"b":null}'


def test_distinct_values_give_distinct_text():
    samples = [{'a': 1}, {'a': '1'}, {'a': 1.5}, {'a': True}, {'a': [1]}, {'a': {'b': 1}}, {'b': 1}, {}]
    texts = [canonicalize(sample) for sample in samples]
    assert len(set(texts)) == len(texts)


def test_empty_containers():
    assert canonicalize({}) == '{}'
    assert canonicalize([]) == '[]'
    assert canonicalize({'a': {}, 'b': []}) == '{"a":{},"b":[]}'


def test_tuple_encodes_as_sequence():
    assert canonicalize((1, 'x')) == '[1,"x"]'


def test_scalars():
    assert canonicalize(None) == 'null'
    assert canonicalize(True) == 'true'
    assert canonicalize(False) == 'false'
    assert canonicalize(0) == '0'
    assert canonicalize(-42) == '-42'
    assert canonicalize(2 ** 64 - 1) == '18446744073709551615'


@pytest.mark.parametrize('value, expected', [
    (1.5, '1.5'),
    (5.0, '5'),
    (-0.0, '-0'),
    (0.0, '0'),
    (0.1, '0.1'),
    (123456789.123, '123456789.123'),
    (0.000001, '0.000001'),
    (1e20, '100000000000000000000'),
    (1e21, '1e+21'),
    (1e-7, '1e-7'),
    (1.5e-10, '1.5e-10'),
    (-2.5e300, '-2.5e+300'),
])
def test_float_format(value, expected):
    assert canonicalize(value) == expected


@pytest.mark.parametrize('value, expected', [
    (Decimal('1.50'), '1.5'),
    (Decimal('100'), '100'),
    (Decimal('1E+2'), '100'),
    (Decimal('0.00010'), '0.0001'),
    (Decimal('-3.000'), '-3'),
])
def test_decimal_format(value, expected):
    assert canonicalize(value) == expected


def test_string_escapes():
    assert canonicalize('a"b') == '"a\\"b"'
    assert canonicalize('a\\b') == '"a\\\\b"'
    assert canonicalize('a\nb\tc') == '"a\\nb\\tc"'
    assert canonicalize(chr(1)) == '"\\u0001"'


def test_html_sensitive_characters_escaped():
    assert canonicalize('<a&b>') == '"\\u003ca\\u0026b\\u003e"'
    assert canonicalize(chr(0x2028) + chr(0x2029)) == '"\\u2028\\u2029"'


def test_non_ascii_kept_as_utf8():
    assert canonicalize({'备注': '中文'}) == '{"备注":"中文"}'


def test_lone_surrogate_rejected():
    with pytest.raises(EncodingError):
        canonicalize({'a': chr(0xD800)})


@pytest.mark.parametrize('value', [math.nan, math.inf, -math.inf, Decimal('NaN'), Decimal('Infinity')])
def test_non_finite_numbers_rejected(value):
    with pytest.raises(EncodingError):
        canonicalize({'a': value})


@pytest.mark.parametrize('value', [b'bytes', {1, 2}, object(), 1j])
def test_unsupported_types_rejected(value):
    with pytest.raises(EncodingError):
        canonicalize({'a': [value]})


def test_non_string_key_rejected():
    with pytest.raises(EncodingError):
        canonicalize({1: 'a'})


def test_encoding_error_is_value_error():
    with pytest.raises(ValueError):
        canonicalize(object())


def test_int_enum_written_as_number():
    class Side(IntEnum):
        BUY = 1
        SELL = 2

    assert canonicalize({'side': Side.SELL, 'sides': [Side.BUY]}) == '{"side":2,"sides":[1]}'
