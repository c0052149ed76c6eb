# -*- coding: utf-8 -*-
# astersign/errors.py
# Error hierarchy for the request-signing pipeline and the Aster transport.


class AsterSignError(Exception):
    """所有 astersign 异常的基类"""


class EncodingError(AsterSignError, ValueError):
    """参数无法规范化或无法按 ABI 编码（不支持的类型、非法地址、nonce 越界等）"""


class SigningError(AsterSignError):
    """私钥格式错误或底层签名计算失败"""


class InvariantViolation(AsterSignError):
    """签名结果不满足固定格式（例如长度不是 65 字节），属于库级别的 bug"""


class ClockError(AsterSignError):
    """nonce 时钟读取失败或 nonce 空间耗尽"""


class APIError(AsterSignError):
    """
    服务端返回的 API 错误

    Args:
        code: 服务端错误码（缺失时为 0）
        message: 服务端错误信息
        status_code: HTTP 状态码
        response: 原始响应体（无法解析为 {code, msg} 时保留）
    """

    def __init__(self, code=0, message='', status_code=None, response=None):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(str(self))

    def is_valid(self):
        """响应体中是否包含可识别的错误码或错误信息"""
        return self.code != 0 or self.message != ''

    def __str__(self):
        if self.is_valid():
            return f"<APIError> code={self.code}, msg={self.message}"
        return f"<APIError> status={self.status_code}, response={self.response!r}"
