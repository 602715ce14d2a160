"""
报告格式化测试
"""
import json
from datetime import datetime, timezone

from certificate_inspector.services.report_formatter import ReportFormatter, JSONReportFormatter
from certificate_inspector.services.error_handler import ConnectionRefused
from certificate_inspector.models import CertificateReport, FetchResult


def _report(san=None) -> CertificateReport:
    return CertificateReport(
        tested_server="example.com",
        common_name="*.example.com",
        start_date=datetime(2025, 1, 1, tzinfo=timezone.utc),
        end_date=datetime(2025, 4, 1, tzinfo=timezone.utc),
        subject_alternative_names=san if san is not None else ["example.com", "*.example.com"],
        thumbprint="0123456789ABCDEF0123456789ABCDEF01234567",
        issuer_name="R11 Let's Encrypt Authority",
        message="Certificate retrieved successfully from example.com"
    )


class TestReportFormatter:
    """文本格式化测试类"""

    def setup_method(self):
        """测试前准备"""
        self.formatter = ReportFormatter()

    def test_format_report(self):
        """测试格式化证书报告"""
        text = self.formatter.format_report(_report())

        assert text.splitlines() == [
            "TestedServer: example.com",
            "CommonName: *.example.com",
            "StartDate: 2025-01-01T00:00:00+00:00",
            "EndDate: 2025-04-01T00:00:00+00:00",
            "SubjectAlternativeNames: example.com, *.example.com",
            "Thumbprint: 0123456789ABCDEF0123456789ABCDEF01234567",
            "IssuerName: R11 Let's Encrypt Authority",
            "Message: Certificate retrieved successfully from example.com",
        ]

    def test_format_report_without_san(self):
        """测试没有SAN时显示占位值"""
        text = self.formatter.format_report(_report(san=[]))

        assert "SubjectAlternativeNames: Not Available" in text

    def test_format_error_result(self):
        """测试格式化错误结果"""
        error = ConnectionRefused("example.com", 8443, "example.com:8443 拒绝连接")
        result = FetchResult(host="example.com", error=error)

        text = self.formatter.format_result(result)

        assert text == "TestedServer: example.com\nError: ConnectionRefused: example.com:8443 拒绝连接"

    def test_format_error_result_with_cause(self):
        """测试错误结果附带底层原因"""
        cause = ConnectionRefusedError(111, "Connection refused")
        error = ConnectionRefused("example.com", 443, "example.com:443 拒绝连接", cause=cause)

        text = self.formatter.format_result(FetchResult(host="example.com", error=error))

        assert text.splitlines()[1] == (
            "Error: ConnectionRefused: example.com:443 拒绝连接 "
            "(原因: ConnectionRefusedError: [Errno 111] Connection refused)"
        )


class TestJSONReportFormatter:
    """JSON格式化测试类"""

    def setup_method(self):
        """测试前准备"""
        self.formatter = JSONReportFormatter()

    def test_format_success_result(self):
        """测试JSON成功结果"""
        data = json.loads(self.formatter.format_result(FetchResult(host="example.com", report=_report())))

        assert data['TestedServer'] == "example.com"
        assert data['CommonName'] == "*.example.com"
        assert data['StartDate'] == "2025-01-01T00:00:00+00:00"
        assert data['SubjectAlternativeNames'] == ["example.com", "*.example.com"]
        assert data['IssuerName'] == "R11 Let's Encrypt Authority"
        assert data['Error'] is None

    def test_format_success_without_san(self):
        """测试JSON中SAN占位值"""
        data = json.loads(self.formatter.format_report(_report(san=[])))

        assert data['SubjectAlternativeNames'] == "Not Available"

    def test_format_error_result(self):
        """测试JSON错误结果"""
        error = ConnectionRefused("example.com", 443, "example.com:443 拒绝连接")
        data = json.loads(self.formatter.format_result(FetchResult(host="example.com", error=error)))

        assert data['TestedServer'] == "example.com"
        assert data['Error'] == {
            'type': 'ConnectionRefused',
            'message': "example.com:443 拒绝连接",
            'cause': '',
        }
        assert 'Thumbprint' not in data

    def test_format_multiple_results(self):
        """测试多个结果输出为数组"""
        results = [
            FetchResult(host="example.com", report=_report()),
            FetchResult(host="example.org", error=ConnectionRefused("example.org", 443, "refused")),
        ]

        data = json.loads(self.formatter.format_results(results))

        assert isinstance(data, list)
        assert [item['TestedServer'] for item in data] == ["example.com", "example.org"]

    def test_format_error_result_with_cause(self):
        """测试JSON错误结果附带底层原因"""
        cause = ConnectionRefusedError(111, "Connection refused")
        error = ConnectionRefused("example.com", 443, "example.com:443 拒绝连接", cause=cause)

        data = json.loads(self.formatter.format_result(FetchResult(host="example.com", error=error)))

        assert data['Error']['cause'] == "ConnectionRefusedError: [Errno 111] Connection refused"
