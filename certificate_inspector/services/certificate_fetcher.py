"""
TLS叶证书获取服务
"""
import ssl
import socket
from typing import Optional
import logging

from cryptography import x509

from ..interfaces import CertificateFetcherInterface
from ..models import CertificateReport, FetchResult, FetcherConfig
from .certificate_parser import CertificateParser
from .error_handler import NetworkErrorHandler, FetchError, NoCertificate, ParseFailure


class CertificateFetcher(CertificateFetcherInterface):
    """TLS叶证书获取器"""

    def __init__(self, port: int = 443, timeout: float = 1.0, handshake_timeout: float = 5.0,
                 insecure_skip_verify: bool = False):
        """
        初始化证书获取器

        Args:
            port: TLS端口，默认443
            timeout: TCP连接超时时间（秒）
            handshake_timeout: TLS握手超时时间（秒）
            insecure_skip_verify: 为True时不校验对端证书和主机名，接受任何证书
        """
        _validate_port(port)
        _validate_timeout('timeout', timeout)
        _validate_timeout('handshake_timeout', handshake_timeout)

        self.port = port
        self.timeout = timeout
        self.handshake_timeout = handshake_timeout
        self.insecure_skip_verify = insecure_skip_verify
        self.logger = logging.getLogger(__name__)
        self.parser = CertificateParser()
        self.error_handler = NetworkErrorHandler()

    @classmethod
    def from_config(cls, config: FetcherConfig) -> 'CertificateFetcher':
        return cls(
            port=config.port,
            timeout=config.timeout,
            handshake_timeout=config.handshake_timeout,
            insecure_skip_verify=config.insecure_skip_verify
        )

    def fetch(self, host: str) -> FetchResult:
        """
        获取单个主机的叶证书信息

        Args:
            host: 主机名或IP地址

        Returns:
            FetchResult: 成功时带 report，失败时带 error

        Raises:
            ValueError: 主机名为空
        """
        if not host or not host.strip():
            raise ValueError("主机名不能为空")
        host = host.strip()

        try:
            report = self.fetch_report(host)
        except FetchError as e:
            self.logger.debug(f"主机 {host}:{self.port} 获取失败 ({e.kind}): {e.cause_message}")
            return FetchResult(host=host, error=e)

        self.logger.info(
            f"证书获取成功 - 主机: {host}:{self.port}, "
            f"CN: {report.common_name}, "
            f"颁发者: {report.issuer_name}, "
            f"过期时间: {report.end_date.isoformat()}"
        )
        return FetchResult(host=host, report=report)

    def fetch_report(self, host: str) -> CertificateReport:
        """
        获取并解析叶证书

        Raises:
            FetchError: 任意阶段失败
        """
        der_bytes = self._get_peer_certificate(host)

        try:
            return self.parser.build_report(host, der_bytes)
        except (ValueError, x509.DuplicateExtension, x509.UnsupportedGeneralNameType) as e:
            raise ParseFailure(host, self.port, f"无法解析 {host}:{self.port} 的证书: {e}", cause=e) from e

    def _create_context(self) -> ssl.SSLContext:
        """创建TLS客户端上下文"""
        if not self.insecure_skip_verify:
            return ssl.create_default_context()

        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        return context

    def _get_peer_certificate(self, host: str) -> bytes:
        """
        建立连接并读取对端叶证书（DER）

        Args:
            host: 主机名

        Returns:
            bytes: DER编码的叶证书

        Raises:
            FetchError: 连接、握手失败或没有证书
        """
        context = self._create_context()

        try:
            sock = socket.create_connection((host, self.port), timeout=self.timeout)
        except (OSError, UnicodeError) as e:
            raise self.error_handler.classify_error(host, self.port, e, phase="connect") from e

        with sock:
            # 握手阶段单独计时
            sock.settimeout(self.handshake_timeout)
            try:
                with context.wrap_socket(sock, server_hostname=host) as ssock:
                    self.logger.debug(
                        f"主机 {host}:{self.port} 握手完成，协议: {ssock.version()}，加密套件: {_cipher_name(ssock)}"
                    )
                    der_bytes = ssock.getpeercert(binary_form=True)
            except (OSError, UnicodeError) as e:
                raise self.error_handler.classify_error(host, self.port, e, phase="handshake") from e

        if not der_bytes:
            raise NoCertificate(host, self.port, f"无法获取主机 {host}:{self.port} 的SSL证书")

        return der_bytes


def fetch_certificate(host: str, port: int = 443, timeout: float = 1.0,
                      handshake_timeout: float = 5.0) -> FetchResult:
    """
    以诊断模式（不校验证书）获取主机的叶证书信息

    Args:
        host: 主机名或IP地址
        port: TLS端口，默认443
        timeout: TCP连接超时时间（秒），默认1秒
        handshake_timeout: TLS握手超时时间（秒）

    Returns:
        FetchResult: 获取结果
    """
    fetcher = CertificateFetcher(
        port=port,
        timeout=timeout,
        handshake_timeout=handshake_timeout,
        insecure_skip_verify=True
    )
    return fetcher.fetch(host)


def _cipher_name(ssock: ssl.SSLSocket) -> Optional[str]:
    cipher = ssock.cipher()
    return cipher[0] if cipher else None


def _validate_port(port: int):
    if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
        raise ValueError(f"端口必须是1-65535之间的整数: {port}")


def _validate_timeout(name: str, value: float):
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"{name} 必须是正数: {value}")
