"""
证书字段解析服务
"""
import re
from typing import List, Optional
import logging

from cryptography import x509
from cryptography.hazmat.primitives import hashes

from ..models import CertificateReport

UNKNOWN_COMMON_NAME = "Unknown"

# 唯一的颁发者显示名替换
R11_ISSUER_CN = "R11"
R11_ISSUER_DISPLAY_NAME = "R11 Let's Encrypt Authority"

DNS_NAME_PREFIX = "DNS Name="

_COMMON_NAME_PATTERN = re.compile(r'CN=([^,]*)')


def extract_common_name(distinguished_name: str) -> Optional[str]:
    """
    从DN字符串中提取 CN，取 "CN=" 之后到下一个逗号或字符串结尾的部分

    不处理转义逗号和多值RDN。

    Args:
        distinguished_name: 形如 "CN=example.com,O=Example" 的DN字符串

    Returns:
        Optional[str]: CN值，不存在时返回None
    """
    if not distinguished_name:
        return None

    match = _COMMON_NAME_PATTERN.search(distinguished_name)
    if not match:
        return None

    return match.group(1)


def apply_issuer_override(issuer_cn: str) -> str:
    """颁发者显示名替换（仅精确匹配 "R11"）"""
    if issuer_cn == R11_ISSUER_CN:
        return R11_ISSUER_DISPLAY_NAME
    return issuer_cn


def strip_dns_prefix(entry: str) -> str:
    """去掉SAN条目的 "DNS Name=" 前缀"""
    if entry.startswith(DNS_NAME_PREFIX):
        return entry[len(DNS_NAME_PREFIX):]
    return entry


class CertificateParser:
    """叶证书解析器"""

    def __init__(self):
        """初始化证书解析器"""
        self.logger = logging.getLogger(__name__)

    def load_certificate(self, der_bytes: bytes) -> x509.Certificate:
        """
        加载DER编码的证书

        Raises:
            ValueError: 证书数据无法解析
        """
        return x509.load_der_x509_certificate(der_bytes)

    def build_report(self, host: str, der_bytes: bytes) -> CertificateReport:
        """
        从DER证书构建报告

        Args:
            host: 被测主机名
            der_bytes: 叶证书DER字节

        Returns:
            CertificateReport: 证书报告

        Raises:
            ValueError: 证书或字段无法解析
        """
        cert = self.load_certificate(der_bytes)

        subject_dn = cert.subject.rfc4514_string()
        issuer_dn = cert.issuer.rfc4514_string()
        self.logger.debug(f"主机 {host} 证书主体: {subject_dn}，颁发者: {issuer_dn}")

        common_name = extract_common_name(subject_dn) or UNKNOWN_COMMON_NAME
        issuer_name = apply_issuer_override(extract_common_name(issuer_dn) or "")

        return CertificateReport(
            tested_server=host,
            common_name=common_name,
            start_date=cert.not_valid_before_utc,
            end_date=cert.not_valid_after_utc,
            subject_alternative_names=self.parse_subject_alternative_names(cert),
            thumbprint=self.compute_thumbprint(cert),
            issuer_name=issuer_name,
            message=f"Certificate retrieved successfully from {host}"
        )

    def parse_subject_alternative_names(self, cert: x509.Certificate) -> List[str]:
        """
        解析SAN扩展中的DNS名称

        Args:
            cert: 证书对象

        Returns:
            List[str]: DNS名称列表，扩展不存在时为空列表
        """
        try:
            extension = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)
        except x509.ExtensionNotFound:
            return []

        dns_names = extension.value.get_values_for_type(x509.DNSName)
        return [strip_dns_prefix(name) for name in dns_names]

    def compute_thumbprint(self, cert: x509.Certificate) -> str:
        """证书指纹：DER的SHA-1，大写十六进制，无分隔符"""
        return cert.fingerprint(hashes.SHA1()).hex().upper()
