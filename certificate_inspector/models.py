"""
数据模型定义
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Union

# SAN扩展缺失时的显示值
SAN_NOT_AVAILABLE = "Not Available"


@dataclass(frozen=True)
class CertificateReport:
    """叶证书信息报告"""
    tested_server: str
    common_name: str
    start_date: datetime
    end_date: datetime
    subject_alternative_names: List[str]
    thumbprint: str
    issuer_name: str
    message: Optional[str] = None

    @property
    def subject_alternative_names_display(self) -> Union[List[str], str]:
        """SAN显示值，扩展缺失时为 "Not Available" """
        if not self.subject_alternative_names:
            return SAN_NOT_AVAILABLE
        return list(self.subject_alternative_names)

    @property
    def days_until_expiry(self) -> int:
        """距离过期的天数（负数表示已过期）"""
        delta = self.end_date - datetime.now(timezone.utc)
        return delta.days

    @property
    def is_expired(self) -> bool:
        """判断是否已过期"""
        return self.end_date < datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'TestedServer': self.tested_server,
            'CommonName': self.common_name,
            'StartDate': self.start_date.isoformat(),
            'EndDate': self.end_date.isoformat(),
            'SubjectAlternativeNames': self.subject_alternative_names_display,
            'Thumbprint': self.thumbprint,
            'IssuerName': self.issuer_name,
            'Message': self.message,
        }


@dataclass(frozen=True)
class FetcherConfig:
    """证书获取配置"""
    port: int = 443
    timeout: float = 1.0
    handshake_timeout: float = 5.0
    insecure_skip_verify: bool = False


@dataclass
class FetchResult:
    """单次证书获取结果：report 与 error 二者只有一个有值"""
    host: str
    report: Optional[CertificateReport] = None
    error: Optional[Exception] = None

    @property
    def is_ok(self) -> bool:
        return self.report is not None and self.error is None

    def to_dict(self) -> Dict[str, Any]:
        if self.is_ok:
            result = self.report.to_dict()
            result['Error'] = None
            return result

        error_kind = getattr(self.error, 'kind', type(self.error).__name__)
        return {
            'TestedServer': self.host,
            'Message': f"Failed to retrieve certificate from {self.host}",
            'Error': {
                'type': error_kind,
                'message': str(self.error),
                'cause': getattr(self.error, 'cause_message', ''),
            },
        }


@dataclass
class RunSummary:
    """CLI一次运行的统计"""
    total_hosts: int
    successful_fetches: int
    failed_fetches: int
    results: List[FetchResult] = field(default_factory=list)
