#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
配置文件读取器
读取 aster.yaml 中的接入配置，生成显式传递的 AsterSettings

aster.yaml 格式（所有字段可选）:
    aster:
      base_url: https://fapi.asterdex.com
      testnet: false
      recv_window: '50000'
      timeout: 15
      time_offset_ms: 0
      debug: false
      proxy: null
      user_agent: astersign/python
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional

from astersign.configs.account_reader import default_config_dir
from astersign.signing.request import DEFAULT_RECV_WINDOW
from astersign.utils.logger import setup_logger

BASE_API_MAIN_URL = 'https://fapi.asterdex.com'
BASE_API_TESTNET_URL = 'https://testnet.binancefuture.com'


class AsterSettings(object):
    """
    Aster 接入配置

    Args:
        base_url: 显式指定的 REST 地址，为 None 时按 testnet 选择
        testnet: 是否使用测试网
        recv_window: 请求有效窗口（毫秒）
        timeout: HTTP 超时（秒）
        time_offset_ms: 本地时钟相对服务器的偏移（毫秒）
        debug: 是否输出请求调试日志
        proxy: HTTP(S) 代理地址
        user_agent: User-Agent 请求头
    """

    def __init__(self, base_url: Optional[str] = None, testnet: bool = False,
                 recv_window: str = DEFAULT_RECV_WINDOW, timeout: float = 15,
                 time_offset_ms: int = 0, debug: bool = False, proxy: Optional[str] = None,
                 user_agent: str = 'astersign/python'):
        self.base_url = base_url
        self.testnet = bool(testnet)
        self.recv_window = str(recv_window)
        self.timeout = float(timeout)
        self.time_offset_ms = int(time_offset_ms)
        self.debug = bool(debug)
        self.proxy = proxy
        self.user_agent = user_agent

    @property
    def api_endpoint(self) -> str:
        """实际使用的 REST 地址"""
        if self.base_url:
            return self.base_url
        return BASE_API_TESTNET_URL if self.testnet else BASE_API_MAIN_URL

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'AsterSettings':
        """由配置字典构造，忽略未知字段"""
        data = data or {}
        known = ('base_url', 'testnet', 'recv_window', 'timeout', 'time_offset_ms',
                 'debug', 'proxy', 'user_agent')
        return cls(**{key: data[key] for key in known if data.get(key) is not None})

    def __repr__(self):
        return (f"AsterSettings(api_endpoint={self.api_endpoint!r}, recv_window={self.recv_window!r}, "
                f"timeout={self.timeout}, time_offset_ms={self.time_offset_ms}, debug={self.debug})")


class ConfigReader:
    """配置文件读取器类"""

    def __init__(self, config_dir: Optional[str] = None):
        """
        初始化配置读取器

        Args:
            config_dir: 配置文件目录路径，默认为 default_config_dir()
        """
        self.config_dir = Path(config_dir or default_config_dir())
        self._configs = {}
        self._logger = setup_logger(__name__)

    def load_yaml(self, filename: str) -> Dict[str, Any]:
        """
        加载YAML配置文件

        Args:
            filename: 配置文件名（不包含路径）

        Returns:
            dict: 解析后的配置字典

        Raises:
            FileNotFoundError: 配置文件不存在
            ValueError: YAML解析错误
        """
        file_path = self.config_dir / filename

        if not file_path.exists():
            raise FileNotFoundError(f"配置文件不存在: {file_path}")

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            self._logger.error(f"YAML解析错误 {filename}: {e}")
            raise ValueError(f"YAML解析错误 {filename}: {e}") from e

        # 缓存配置
        self._configs[filename] = config
        self._logger.debug(f"成功加载配置文件: {filename}")
        return config

    def get_config(self, filename: str, key_path: Optional[str] = None) -> Any:
        """
        获取配置文件中的指定值

        Args:
            filename: 配置文件名
            key_path: 键路径，用点分隔，如 'aster.recv_window'

        Returns:
            配置值，键不存在时返回 None
        """
        if filename not in self._configs:
            self.load_yaml(filename)

        value = self._configs[filename]
        if key_path is None:
            return value

        try:
            for key in key_path.split('.'):
                value = value[key]
            return value
        except (KeyError, TypeError):
            self._logger.warning(f"配置键不存在: {key_path}")
            return None

    def get_aster_settings(self, filename: str = 'aster.yaml') -> AsterSettings:
        """
        获取Aster接入配置

        文件不存在时使用默认值；环境变量 ASTER_BASE_URL 优先于 base_url
        """
        try:
            section = self.get_config(filename, 'aster') or {}
        except FileNotFoundError:
            self._logger.info(f"未找到 {filename}，使用默认配置")
            section = {}
        settings = AsterSettings.from_dict(section)
        env_url = os.getenv('ASTER_BASE_URL')
        if env_url:
            settings.base_url = env_url
        return settings

    def reload_config(self, filename: Optional[str] = None):
        """
        重新加载配置文件

        Args:
            filename: 要重新加载的配置文件名，为None时清空缓存
        """
        if filename:
            self._configs.pop(filename, None)
            self.load_yaml(filename)
        else:
            self._configs.clear()


# 创建全局配置读取器实例
config_reader = ConfigReader()

# 便捷函数
def get_aster_settings() -> AsterSettings:
    """获取Aster接入配置的便捷函数"""
    return config_reader.get_aster_settings()
