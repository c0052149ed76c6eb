# -*- coding: utf-8 -*-
# astersign/signing/nonce.py
# Microsecond nonce source with a repeat guard.
#
# Uniqueness is best effort: it holds for every caller sharing one NonceSource
# (one process), not across processes or across restarts after the wall clock
# was stepped back. The server's replay window is what enforces single use.

import threading
import time
from typing import Callable, Optional

from astersign.errors import ClockError

MAX_NONCE = 2 ** 64 - 1


def _clock_micros() -> int:
    return time.time_ns() // 1000


class NonceSource(object):
    """
    基于微秒时钟的 nonce 生成器

    时钟精度可能比调用频率粗，所以每次返回 max(当前微秒, 上一次 + 1)，
    在锁内更新，保证同一实例在多线程下产生的值严格递增、互不重复。
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        """
        Args:
            clock: 返回当前微秒时间戳的函数，默认读取系统时钟
        """
        self._clock = clock or _clock_micros
        self._lock = threading.Lock()
        self._last = 0

    def next_nonce(self) -> int:
        """
        获取下一个 nonce

        Returns:
            int: 64 位无符号整数

        Raises:
            ClockError: 时钟读取失败、读数非法或 nonce 空间耗尽
        """
        try:
            reading = self._clock()
        except Exception as exc:
            raise ClockError(f"clock read failed: {exc}") from exc
        if isinstance(reading, bool) or not isinstance(reading, int) or reading < 0:
            raise ClockError(f"invalid clock reading: {reading!r}")

        with self._lock:
            nonce = max(reading, self._last + 1)
            if nonce > MAX_NONCE:
                raise ClockError("nonce exceeds the unsigned 64-bit range")
            self._last = nonce
        return nonce


# 创建全局实例
default_nonce_source = NonceSource()


def next_nonce() -> int:
    """使用进程级默认实例获取 nonce 的便捷函数"""
    return default_nonce_source.next_nonce()
