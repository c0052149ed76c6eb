# -*- coding: utf-8 -*-
# astersign/utils/logger.py
# 统一的控制台日志格式

import logging
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(name: str, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    获取带控制台输出的命名日志器

    Args:
        name: 日志器名称
        level: 日志级别，None 时保持日志器已有的级别（首次创建为 INFO）

    Returns:
        logging.Logger: 已配置的日志器
    """
    logger = logging.getLogger(name)
    # 避免重复添加handler
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    if level is not None:
        logger.setLevel(level)
    return logger
