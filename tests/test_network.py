"""
真实网络测试，无法解析公网域名时跳过
"""
import socket
import time

import pytest

from certificate_inspector.services.certificate_fetcher import fetch_certificate
from certificate_inspector.services.error_handler import FetchTimeout


def _network_available() -> bool:
    try:
        socket.create_connection(("google.com", 443), timeout=3).close()
        return True
    except OSError:
        return False


pytestmark = pytest.mark.skipif(not _network_available(), reason="需要访问公网")


class TestLiveHosts:
    """公网主机测试"""

    def test_google(self):
        """测试获取 google.com 证书"""
        result = fetch_certificate("google.com", 443, timeout=5.0)

        assert result.is_ok, result.error
        report = result.report
        assert report.common_name in ("*.google.com", "google.com")
        assert report.thumbprint
        assert report.subject_alternative_names_display != "Not Available"
        assert report.end_date > report.start_date

    def test_thumbprint_stable_between_calls(self):
        """测试同一主机两次获取指纹一致"""
        first = fetch_certificate("example.com", 443, timeout=5.0)
        second = fetch_certificate("example.com", 443, timeout=5.0)

        assert first.is_ok and second.is_ok
        # 负载均衡后端可能使用不同证书，只比较相同CN的情况
        if first.report.common_name == second.report.common_name and \
                first.report.start_date == second.report.start_date:
            assert first.report.thumbprint == second.report.thumbprint

    def test_blackholed_address_times_out(self):
        """测试不可路由地址在超时时间内返回"""
        start = time.monotonic()
        result = fetch_certificate("198.51.100.1", 443, timeout=1.0)
        elapsed = time.monotonic() - start

        assert not result.is_ok
        assert isinstance(result.error, FetchTimeout)
        assert result.error.phase == "connect"
        assert elapsed < 2.0
