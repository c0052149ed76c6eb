#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
账户配置文件读取器
读取 account.yaml 中 accounts.aster 下的签名凭证，提供简洁的接口

account.yaml 格式:
    accounts:
      aster:
        main:
          user: '0x...'         # 主账户地址
          signer: '0x...'       # 授权签名地址（API 钱包）
          private_key: '0x...'  # signer 的私钥

环境变量 ASTER_USER / ASTER_SIGNER / ASTER_PRIVATE_KEY 优先于文件中的值。
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional

from astersign.signing.request import Credentials
from astersign.utils.logger import setup_logger

EXCHANGE = 'aster'
CREDENTIAL_FIELDS = ('user', 'signer', 'private_key')
ENV_OVERRIDES = {
    'user': 'ASTER_USER',
    'signer': 'ASTER_SIGNER',
    'private_key': 'ASTER_PRIVATE_KEY',
}


def default_config_dir() -> str:
    """配置目录：环境变量 ASTERSIGN_CONFIG_DIR，默认为当前文件所在目录"""
    return os.getenv('ASTERSIGN_CONFIG_DIR') or os.path.dirname(os.path.abspath(__file__))


class AccountReader:
    """账户配置读取器"""

    def __init__(self, config_dir: Optional[str] = None):
        """
        初始化账户配置读取器

        Args:
            config_dir: 配置文件目录，默认为 default_config_dir()
        """
        self.config_dir = Path(config_dir or default_config_dir())
        self.account_file = self.config_dir / 'account.yaml'
        self._config = None
        self._logger = setup_logger(__name__)

    def _load_config(self) -> Dict[str, Any]:
        """加载配置文件"""
        if self._config is not None:
            return self._config

        if not self.account_file.exists():
            raise FileNotFoundError(f"账户配置文件不存在: {self.account_file}")

        try:
            with open(self.account_file, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"YAML解析错误: {e}") from e
        return self._config

    def get_all_accounts(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        """
        获取所有账户配置

        Returns:
            dict: 格式为 {exchange: {account: {credentials}}}
        """
        config = self._load_config()
        return config.get('accounts') or {}

    def get_exchange_accounts(self, exchange: str = EXCHANGE) -> Dict[str, Dict[str, Any]]:
        """获取指定交易所的所有账户，格式为 {account: {credentials}}"""
        return self.get_all_accounts().get(exchange) or {}

    def get_account(self, account: str = 'main', exchange: str = EXCHANGE) -> Dict[str, Any]:
        """获取指定账户的原始配置，不存在时返回空 dict"""
        return self.get_exchange_accounts(exchange).get(account) or {}

    def list_accounts(self, exchange: str = EXCHANGE) -> List[str]:
        """
        获取指定交易所的账户列表（保持文件中的顺序）

        Returns:
            list: 账户名称列表
        """
        return list(self.get_exchange_accounts(exchange).keys())

    def get_account_name_by_id(self, account_id: int = 0, exchange: str = EXCHANGE) -> str:
        """
        根据账户ID获取账户名称

        账户ID按 account.yaml 中 accounts.aster 下的顺序映射，
        例如 ['main', 'sub1'] 时 account_id=1 对应 sub1

        Raises:
            KeyError: 账户ID超出范围
        """
        accounts = self.list_accounts(exchange)
        if not 0 <= account_id < len(accounts):
            raise KeyError(f"账户ID {account_id} 超出范围，可用账户: {accounts}")
        return accounts[account_id]

    def get_aster_credentials(self, account: str = 'main') -> Dict[str, str]:
        """
        获取Aster账户认证信息（环境变量优先）

        Args:
            account: 账户名称，默认为'main'

        Returns:
            dict: 包含 user, signer, private_key 的字典，缺失字段为空字符串
        """
        account_config = self.get_account(account)
        credentials = {}
        for field in CREDENTIAL_FIELDS:
            value = os.getenv(ENV_OVERRIDES[field]) or account_config.get(field) or ''
            credentials[field] = str(value).strip()
        return credentials

    def is_account_valid(self, account: str = 'main') -> bool:
        """检查账户的三个认证字段是否都已配置"""
        credentials = self.get_aster_credentials(account)
        return all(credentials[field] for field in CREDENTIAL_FIELDS)

    def get_credentials(self, account: str = 'main') -> Credentials:
        """
        构造签名用的 Credentials

        Raises:
            ValueError: 认证字段不完整
        """
        credentials = self.get_aster_credentials(account)
        missing = [field for field in CREDENTIAL_FIELDS if not credentials[field]]
        if missing:
            raise ValueError(f"Aster账户 {account} 缺少认证字段: {missing}")
        self._logger.info(f"使用Aster账户: {account} (user={credentials['user']})")
        return Credentials(**credentials)

    def reload(self):
        """重新加载配置文件"""
        self._config = None
        self._load_config()


# 创建全局实例
account_reader = AccountReader()

# 便捷函数
def get_aster_credentials(account: str = 'main') -> Dict[str, str]:
    """获取Aster认证信息的便捷函数"""
    return account_reader.get_aster_credentials(account)

def get_credentials(account: str = 'main') -> Credentials:
    """获取签名凭证的便捷函数"""
    return account_reader.get_credentials(account)

def list_accounts(exchange: str = EXCHANGE) -> List[str]:
    """获取账户列表的便捷函数"""
    return account_reader.list_accounts(exchange)

def is_account_valid(account: str = 'main') -> bool:
    """检查账户有效性的便捷函数"""
    return account_reader.is_account_valid(account)
