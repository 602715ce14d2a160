"""
命令行入口
"""
import sys
from typing import List, Optional

import click

from .models import FetcherConfig, FetchResult, RunSummary
from .services.certificate_fetcher import CertificateFetcher
from .services.config_validator import ConfigValidator
from .services.error_handler import NetworkErrorHandler
from .services.logger import LoggerService
from .services.report_formatter import ReportFormatter, JSONReportFormatter

__version__ = "1.0.0"


class CertificateInspector:
    """证书检查主类，按顺序逐个主机获取证书"""

    def __init__(self, config: FetcherConfig, log_level: Optional[str] = None):
        """
        初始化检查器

        Args:
            config: 获取配置
            log_level: 日志级别
        """
        self.config = config
        self.logger_service = LoggerService(log_level=log_level)
        self.fetcher = CertificateFetcher.from_config(config)
        self.error_handler = NetworkErrorHandler()

        self.logger_service.log_configuration_info({
            'port': config.port,
            'timeout': config.timeout,
            'handshake_timeout': config.handshake_timeout,
            'insecure_skip_verify': config.insecure_skip_verify,
            'log_level': self.logger_service.log_level
        })

    def execute(self, hosts: List[str]) -> RunSummary:
        """
        执行证书获取

        Args:
            hosts: 主机列表

        Returns:
            RunSummary: 运行统计
        """
        self.logger_service.log_fetch_start(len(hosts))

        results = []
        for host in hosts:
            result = self.fetcher.fetch(host)
            self.logger_service.log_fetch_result(host, result)
            results.append(result)

        self.logger_service.log_fetch_end()
        if len(hosts) > 1:
            self.logger_service.log_execution_summary()

        successful = len([result for result in results if result.is_ok])
        if successful < len(results):
            self._log_error_statistics(results)

        return RunSummary(
            total_hosts=len(hosts),
            successful_fetches=successful,
            failed_fetches=len(results) - successful,
            results=results
        )

    def _log_error_statistics(self, results: List[FetchResult]):
        """记录失败类型统计"""
        error_list = [
            self.error_handler.handle_fetch_error(result.error)
            for result in results if not result.is_ok
        ]
        stats = self.error_handler.get_error_statistics(error_list)

        self.logger_service.logger.warning(
            f"{stats['total_errors']} 个主机获取失败，"
            f"最常见错误: {stats['most_common_error']} ({stats['most_common_error_count']} 次)"
        )
        for info in error_list:
            self.logger_service.logger.info(f"  {info['host']}:{info['port']} 建议: {info['suggested_action']}")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__)
@click.argument("hosts", nargs=-1, required=True)
@click.option("-p", "--port", default=443, show_default=True, type=int, help="TLS端口")
@click.option("-t", "--timeout", default=1.0, show_default=True, type=float,
              help="TCP连接超时（秒）")
@click.option("--handshake-timeout", default=5.0, show_default=True, type=float,
              help="TLS握手超时（秒）")
@click.option("--verify", is_flag=True,
              help="校验对端证书和主机名，默认接受任意证书")
@click.option("--json", "as_json", is_flag=True, help="以JSON格式输出结果")
@click.option("--log-level", default=None,
              help="日志级别 (DEBUG, INFO, WARNING, ERROR)，默认读取 $LOG_LEVEL，未设置时为 INFO")
def main(
    hosts: tuple,
    port: int,
    timeout: float,
    handshake_timeout: float,
    verify: bool,
    as_json: bool,
    log_level: Optional[str],
) -> None:
    """通过TLS连接 HOSTS 并输出叶证书信息"""
    config = FetcherConfig(
        port=port,
        timeout=timeout,
        handshake_timeout=handshake_timeout,
        insecure_skip_verify=not verify
    )

    validator = ConfigValidator()
    validation = validator.validate_all_configurations(list(hosts), config, log_level)
    if not validation['is_valid']:
        click.echo(validator.get_configuration_summary(list(hosts), config, log_level), err=True)
        raise click.UsageError("; ".join(validation['errors']))

    inspector = CertificateInspector(config, log_level=log_level)
    summary = inspector.execute([host.strip() for host in hosts])

    if as_json:
        click.echo(JSONReportFormatter().format_results(summary.results))
    else:
        formatter = ReportFormatter()
        for result in summary.results:
            click.echo(formatter.format_result(result), err=not result.is_ok)
            click.echo("", err=not result.is_ok)

    sys.exit(0 if summary.failed_fetches == 0 else 1)


if __name__ == "__main__":
    main()
