"""
日志服务
"""
import os
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from ..interfaces import LoggerServiceInterface
from ..models import FetchResult


class LoggerService(LoggerServiceInterface):
    """日志服务实现"""

    def __init__(self, logger_name: str = "certificate_inspector", log_level: Optional[str] = None):
        """
        初始化日志服务

        Args:
            logger_name: 日志器名称
            log_level: 日志级别，如果为None则从环境变量读取
        """
        self.logger_name = logger_name
        self.log_level = log_level or os.getenv('LOG_LEVEL', 'INFO')

        # 配置日志器
        self.logger = logging.getLogger(logger_name)
        self._configure_logger()

        # 执行统计
        self.execution_stats = self._empty_stats()

    def _configure_logger(self):
        """配置日志器"""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        self.logger.setLevel(level)

        # 避免重复添加处理器
        if not self.logger.handlers:
            # 默认输出到stderr，stdout留给报告
            handler = logging.StreamHandler()
            handler.setLevel(level)

            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            handler.setFormatter(formatter)

            self.logger.addHandler(handler)
        else:
            for handler in self.logger.handlers:
                handler.setLevel(level)

        # 防止日志传播到根日志器
        self.logger.propagate = False

    @staticmethod
    def _empty_stats() -> Dict[str, Any]:
        return {
            'start_time': None,
            'end_time': None,
            'total_hosts': 0,
            'successful_fetches': 0,
            'failed_fetches': 0,
            'errors': []
        }

    def log_fetch_start(self, host_count: int):
        """
        记录获取开始

        Args:
            host_count: 要检查的主机数量
        """
        self.execution_stats['start_time'] = datetime.now(timezone.utc)
        self.execution_stats['total_hosts'] = host_count

        self.logger.info(f"开始获取证书，共 {host_count} 个主机")

    def log_fetch_result(self, host: str, result: FetchResult):
        """
        记录获取结果

        Args:
            host: 主机名
            result: 获取结果
        """
        if result.is_ok:
            self.execution_stats['successful_fetches'] += 1
            report = result.report

            if report.is_expired:
                self.logger.warning(
                    f"证书已过期 - 主机: {host}, "
                    f"过期时间: {report.end_date.isoformat()}, "
                    f"指纹: {report.thumbprint}"
                )
            else:
                self.logger.info(
                    f"证书信息 - 主机: {host}, "
                    f"CN: {report.common_name}, "
                    f"剩余天数: {report.days_until_expiry} 天, "
                    f"指纹: {report.thumbprint}"
                )
        else:
            self.execution_stats['failed_fetches'] += 1
            self._record_error(host, result.error)
            self.logger.error(
                f"证书获取失败 - 主机: {host}, "
                f"错误: {result.error}"
            )

    def _record_error(self, host: str, error: Exception):
        self.execution_stats['errors'].append({
            'host': host,
            'error_type': getattr(error, 'kind', type(error).__name__),
            'error_message': str(error),
            'timestamp': datetime.now(timezone.utc).isoformat()
        })

    def log_fetch_end(self):
        """记录获取结束"""
        self.execution_stats['end_time'] = datetime.now(timezone.utc)

        self.logger.info(
            f"证书获取完成: 总计 {self.execution_stats['total_hosts']} 个主机, "
            f"成功 {self.execution_stats['successful_fetches']} 个, "
            f"失败 {self.execution_stats['failed_fetches']} 个"
        )

    def log_configuration_info(self, config: Dict[str, Any]):
        """
        记录配置信息

        Args:
            config: 配置信息字典
        """
        self.logger.debug("运行配置:")
        for key, value in config.items():
            self.logger.debug(f"  {key}: {value}")

    def get_execution_summary(self) -> Dict[str, Any]:
        """
        获取执行摘要

        Returns:
            Dict[str, Any]: 执行摘要信息
        """
        stats = self.execution_stats
        duration = 0
        if stats['start_time'] and stats['end_time']:
            duration = (stats['end_time'] - stats['start_time']).total_seconds()

        return {
            'start_time': stats['start_time'].isoformat() if stats['start_time'] else None,
            'end_time': stats['end_time'].isoformat() if stats['end_time'] else None,
            'duration_seconds': duration,
            'total_hosts': stats['total_hosts'],
            'successful_fetches': stats['successful_fetches'],
            'failed_fetches': stats['failed_fetches'],
            'success_rate': (
                stats['successful_fetches'] / stats['total_hosts']
                if stats['total_hosts'] > 0 else 0
            ),
            'error_count': len(stats['errors']),
            'errors': stats['errors']
        }

    def log_execution_summary(self):
        """记录执行摘要"""
        summary = self.get_execution_summary()

        self.logger.info("=" * 50)
        self.logger.info("执行摘要")
        self.logger.info("=" * 50)
        self.logger.info(f"执行时长: {summary['duration_seconds']:.2f} 秒")
        self.logger.info(f"总主机数: {summary['total_hosts']}")
        self.logger.info(f"成功获取: {summary['successful_fetches']}")
        self.logger.info(f"获取失败: {summary['failed_fetches']}")
        self.logger.info(f"成功率: {summary['success_rate']:.1%}")

        if summary['errors']:
            self.logger.info(f"错误数量: {summary['error_count']}")
            for i, error in enumerate(summary['errors'][:5], 1):  # 只显示前5个错误
                self.logger.info(f"  错误 {i}: {error['host']} - {error['error_type']}: {error['error_message']}")

            if len(summary['errors']) > 5:
                self.logger.info(f"  ... 还有 {len(summary['errors']) - 5} 个错误")

        self.logger.info("=" * 50)
