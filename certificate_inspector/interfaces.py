"""
服务接口定义
"""
from abc import ABC, abstractmethod
from .models import CertificateReport, FetchResult


class CertificateFetcherInterface(ABC):
    """证书获取器接口"""

    @abstractmethod
    def fetch(self, host: str) -> FetchResult:
        """获取单个主机的叶证书信息"""
        pass


class ReportFormatterInterface(ABC):
    """报告格式化接口"""

    @abstractmethod
    def format_report(self, report: CertificateReport) -> str:
        """格式化证书报告"""
        pass

    @abstractmethod
    def format_result(self, result: FetchResult) -> str:
        """格式化获取结果（成功或失败）"""
        pass


class LoggerServiceInterface(ABC):
    """日志服务接口"""

    @abstractmethod
    def log_fetch_start(self, host_count: int):
        """记录获取开始"""
        pass

    @abstractmethod
    def log_fetch_result(self, host: str, result: FetchResult):
        """记录获取结果"""
        pass
