"""
报告格式化服务
"""
import json
from typing import List

from ..interfaces import ReportFormatterInterface
from ..models import CertificateReport, FetchResult, SAN_NOT_AVAILABLE


class ReportFormatter(ReportFormatterInterface):
    """文本报告格式化器"""

    def format_report(self, report: CertificateReport) -> str:
        """
        格式化证书报告

        Args:
            report: 证书报告

        Returns:
            str: 每个字段一行的文本
        """
        san = report.subject_alternative_names_display
        if san != SAN_NOT_AVAILABLE:
            san = ", ".join(san)

        lines = [
            f"TestedServer: {report.tested_server}",
            f"CommonName: {report.common_name}",
            f"StartDate: {report.start_date.isoformat()}",
            f"EndDate: {report.end_date.isoformat()}",
            f"SubjectAlternativeNames: {san}",
            f"Thumbprint: {report.thumbprint}",
            f"IssuerName: {report.issuer_name}",
        ]
        if report.message:
            lines.append(f"Message: {report.message}")

        return "\n".join(lines)

    def format_result(self, result: FetchResult) -> str:
        """
        格式化获取结果

        Args:
            result: 获取结果

        Returns:
            str: 格式化文本
        """
        if result.is_ok:
            return self.format_report(result.report)

        error_kind = getattr(result.error, 'kind', type(result.error).__name__)
        error_line = f"Error: {error_kind}: {result.error}"
        cause = getattr(result.error, 'cause_message', '')
        if cause:
            error_line += f" (原因: {cause})"

        return "\n".join([
            f"TestedServer: {result.host}",
            error_line,
        ])


class JSONReportFormatter(ReportFormatter):
    """JSON报告格式化器"""

    def format_report(self, report: CertificateReport) -> str:
        return json.dumps(report.to_dict(), ensure_ascii=False, indent=2)

    def format_result(self, result: FetchResult) -> str:
        return json.dumps(result.to_dict(), ensure_ascii=False, indent=2)

    def format_results(self, results: List[FetchResult]) -> str:
        if len(results) == 1:
            return self.format_result(results[0])
        return json.dumps([result.to_dict() for result in results], ensure_ascii=False, indent=2)
