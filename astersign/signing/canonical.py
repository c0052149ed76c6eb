# -*- coding: utf-8 -*-
# astersign/signing/canonical.py
# Deterministic text form of a request parameter tree.
#
# The text produced here is what the verifier hashes, so it must agree byte for
# byte with the server's JSON encoder:
#   - mapping keys sorted by code point at every depth, sequences kept in order
#   - no whitespace
#   - '<', '>', '&', U+2028 and U+2029 inside strings are \u-escaped
#   - floats use shortest round-trip digits, fixed notation for
#     1e-6 <= |x| < 1e21, exponent notation otherwise ("1e-7", "1e+21")

import json
import math
import re
from decimal import Decimal
from typing import Dict, List, Tuple, Union

from astersign.errors import EncodingError

Scalar = Union[None, bool, int, float, Decimal, str]
ParameterTree = Union[Scalar, List['ParameterTree'], Tuple['ParameterTree', ...], Dict[str, 'ParameterTree']]

_HTML_ESCAPES = str.maketrans({
    '<': '\\u003c',
    '>': '\\u003e',
    '&': '\\u0026',
    '\u2028': '\\u2028',
    '\u2029': '\\u2029',
})

_SHORT_NEGATIVE_EXPONENT = re.compile(r'e-0(\d)$')


def canonicalize(tree: ParameterTree) -> str:
    """
    生成参数树的规范化文本

    同一组键值对无论以何种顺序插入，输出都完全相同；显式的 null 会被保留，
    因此 “缺失字段” 与 “值为 null 的字段” 得到不同的文本。

    Args:
        tree: 参数树（None/bool/数字/str/list/tuple/dict 的任意嵌套）

    Returns:
        str: 紧凑的 JSON 文本

    Raises:
        EncodingError: 出现不支持的类型、非字符串键或非有限数字

    Example:
        canonicalize({"symbol": "BTCUSDT", "quantity": "1.5"})
        # 返回: '{"quantity":"1.5","symbol":"BTCUSDT"}'
    """
    if tree is None:
        return 'null'
    # bool 是 int 的子类，必须先判断
    if isinstance(tree, bool):
        return 'true' if tree else 'false'
    if isinstance(tree, str):
        return format_string(tree)
    if isinstance(tree, int):
        return str(int(tree))
    if isinstance(tree, float):
        return format_float(tree)
    if isinstance(tree, Decimal):
        return format_decimal(tree)
    if isinstance(tree, dict):
        for key in tree:
            if not isinstance(key, str):
                raise EncodingError(f"mapping keys must be str, got {type(key).__name__}: {key!r}")
        items = [format_string(key) + ':' + canonicalize(tree[key]) for key in sorted(tree)]
        return '{' + ','.join(items) + '}'
    if isinstance(tree, (list, tuple)):
        return '[' + ','.join(canonicalize(item) for item in tree) + ']'
    raise EncodingError(f"unsupported parameter type: {type(tree).__name__}")


def format_string(value: str) -> str:
    """按 JSON 规则转义字符串，并额外转义 HTML 敏感字符"""
    try:
        value.encode('utf-8')
    except UnicodeEncodeError as exc:
        raise EncodingError(f"string is not valid UTF-8 text: {value!r}") from exc
    return json.dumps(value, ensure_ascii=False).translate(_HTML_ESCAPES)


def format_float(value: float) -> str:
    """浮点数的固定格式：最短可还原位数，整数值不带 '.0'"""
    if not math.isfinite(value):
        raise EncodingError(f"non-finite number not allowed: {value!r}")
    if value == 0:
        return '-0' if math.copysign(1.0, value) < 0 else '0'
    magnitude = abs(value)
    if 1e-6 <= magnitude < 1e21:
        return _fixed_point(Decimal(repr(value)))
    # repr 在这个量级一定使用指数形式
    return _SHORT_NEGATIVE_EXPONENT.sub(r'e-\1', repr(value))


def format_decimal(value: Decimal) -> str:
    if not value.is_finite():
        raise EncodingError(f"non-finite number not allowed: {value!r}")
    return _fixed_point(value)


def _fixed_point(value: Decimal) -> str:
    text = format(value, 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text
