"""
配置验证服务
"""
import os
from typing import Dict, List, Any, Optional
import logging

from ..models import FetcherConfig

VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigValidator:
    """配置验证器"""

    def __init__(self):
        """初始化配置验证器"""
        self.logger = logging.getLogger(__name__)

        # 可选的环境变量
        self.optional_env_vars = {
            'LOG_LEVEL': '日志级别'
        }

    def validate_all_configurations(self, hosts: List[str], config: FetcherConfig,
                                    log_level: Optional[str] = None) -> Dict[str, Any]:
        """
        验证所有配置

        Args:
            hosts: 主机列表
            config: 获取配置
            log_level: 命令行指定的日志级别

        Returns:
            Dict[str, Any]: 验证结果
        """
        validation_result = {
            'is_valid': True,
            'errors': [],
            'warnings': [],
            'configurations': {}
        }

        checks = [
            ('hosts', self.validate_hosts(hosts)),
            ('fetcher', self.validate_fetcher_configuration(config)),
            ('logging', self.validate_log_level(log_level)),
        ]

        for name, result in checks:
            validation_result['configurations'][name] = result
            if not result['is_valid']:
                validation_result['is_valid'] = False
                validation_result['errors'].extend(result['errors'])
            validation_result['warnings'].extend(result['warnings'])

        return validation_result

    def validate_hosts(self, hosts: List[str]) -> Dict[str, Any]:
        """
        验证主机列表，只要求非空，不做域名格式校验

        Args:
            hosts: 主机列表

        Returns:
            Dict[str, Any]: 主机验证结果
        """
        result = {
            'is_valid': True,
            'errors': [],
            'warnings': [],
            'total_hosts': len(hosts),
            'valid_hosts': [],
            'invalid_hosts': []
        }

        if not hosts:
            result['is_valid'] = False
            result['errors'].append("没有指定要检查的主机")
            return result

        for host in hosts:
            if host and host.strip():
                result['valid_hosts'].append(host.strip())
            else:
                result['invalid_hosts'].append(host)

        if result['invalid_hosts']:
            result['is_valid'] = False
            result['errors'].append(f"主机名不能为空，共 {len(result['invalid_hosts'])} 个")

        duplicates = {host for host in result['valid_hosts'] if result['valid_hosts'].count(host) > 1}
        for host in sorted(duplicates):
            result['warnings'].append(f"主机重复: {host}")

        return result

    def validate_fetcher_configuration(self, config: FetcherConfig) -> Dict[str, Any]:
        """
        验证端口和超时配置

        Args:
            config: 获取配置

        Returns:
            Dict[str, Any]: 配置验证结果
        """
        result = {
            'is_valid': True,
            'errors': [],
            'warnings': [],
            'port': config.port,
            'timeout': config.timeout,
            'handshake_timeout': config.handshake_timeout
        }

        if not 1 <= config.port <= 65535:
            result['is_valid'] = False
            result['errors'].append(f"端口超出范围: {config.port}")

        for name in ('timeout', 'handshake_timeout'):
            value = getattr(config, name)
            if value <= 0:
                result['is_valid'] = False
                result['errors'].append(f"{name} 必须大于0: {value}")
            elif value > 60:
                result['warnings'].append(f"{name} 过长: {value}秒")

        if config.insecure_skip_verify:
            result['warnings'].append("证书校验已关闭，结果仅用于诊断")

        return result

    def validate_log_level(self, log_level: Optional[str] = None) -> Dict[str, Any]:
        """
        验证日志级别

        Args:
            log_level: 命令行指定的日志级别，为None时读取环境变量

        Returns:
            Dict[str, Any]: 日志级别验证结果
        """
        result = {
            'is_valid': True,
            'errors': [],
            'warnings': [],
            'log_level': None
        }

        value = log_level or os.getenv('LOG_LEVEL')
        if not value:
            result['log_level'] = 'INFO'
            return result

        if value.upper() in VALID_LOG_LEVELS:
            result['log_level'] = value.upper()
        else:
            # LoggerService 对未知级别回退为 INFO
            result['log_level'] = 'INFO'
            result['warnings'].append(f"日志级别无效: {value}，使用 INFO")

        return result

    def get_configuration_summary(self, hosts: List[str], config: FetcherConfig,
                                  log_level: Optional[str] = None) -> str:
        """
        获取配置摘要

        Returns:
            str: 配置摘要文本
        """
        validation_result = self.validate_all_configurations(hosts, config, log_level)

        lines = [
            "配置验证摘要",
            "=" * 30
        ]

        if validation_result['is_valid']:
            lines.append("✅ 配置验证通过")
        else:
            lines.append("❌ 配置验证失败")

        if validation_result['errors']:
            lines.append("\n错误:")
            for error in validation_result['errors']:
                lines.append(f"  • {error}")

        if validation_result['warnings']:
            lines.append("\n警告:")
            for warning in validation_result['warnings']:
                lines.append(f"  • {warning}")

        return "\n".join(lines)
