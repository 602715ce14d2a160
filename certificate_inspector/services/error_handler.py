"""
错误处理服务
"""
import socket
import ssl
from typing import Any, Optional, Dict, List
from datetime import datetime, timezone
import logging


class FetchError(Exception):
    """证书获取失败的基类"""

    kind = "FetchError"

    def __init__(self, host: str, port: int, message: str, cause: Optional[BaseException] = None):
        self.host = host
        self.port = port
        self.message = message
        self.cause = cause
        super().__init__(message)

    @property
    def cause_message(self) -> str:
        if self.cause is None:
            return ""
        return f"{type(self.cause).__name__}: {self.cause}"


class FetchTimeout(FetchError):
    """连接或握手超时"""

    kind = "Timeout"

    def __init__(self, host: str, port: int, message: str,
                 cause: Optional[BaseException] = None, phase: str = "connect"):
        super().__init__(host, port, message, cause)
        self.phase = phase


class ConnectionFailure(FetchError):
    """TCP层连接失败（超时除外）"""

    kind = "ConnectionFailure"


class ConnectionRefused(ConnectionFailure):
    """目标端口拒绝连接"""

    kind = "ConnectionRefused"


class DNSFailure(ConnectionFailure):
    """主机名解析失败"""

    kind = "DNSFailure"


class HandshakeFailure(FetchError):
    """TLS握手失败"""

    kind = "HandshakeFailure"


class NoCertificate(FetchError):
    """握手成功但对端未提供证书"""

    kind = "NoCertificate"


class ParseFailure(FetchError):
    """证书内容无法解析"""

    kind = "ParseFailure"


class NetworkErrorHandler:
    """网络错误处理器"""

    def __init__(self):
        """初始化网络错误处理器"""
        self.logger = logging.getLogger(__name__)

    def classify_error(self, host: str, port: int, error: BaseException, phase: str = "connect") -> FetchError:
        """
        将底层异常归类为 FetchError

        Args:
            host: 主机名
            port: 端口
            error: 原始异常
            phase: 出错阶段，"connect" 或 "handshake"

        Returns:
            FetchError: 归类后的错误
        """
        if isinstance(error, FetchError):
            return error

        target = f"{host}:{port}"

        # socket.timeout 是 TimeoutError 的别名，必须先于 OSError 判断
        if isinstance(error, (socket.timeout, TimeoutError)):
            stage = "连接" if phase == "connect" else "TLS握手"
            return FetchTimeout(host, port, f"{target} {stage}超时", cause=error, phase=phase)

        if isinstance(error, socket.gaierror):
            return DNSFailure(host, port, f"无法解析主机名 {host}: {error}", cause=error)

        # 空标签或超长标签在IDNA编码时失败，属于主机名问题
        if isinstance(error, UnicodeError):
            return DNSFailure(host, port, f"主机名 {host} 无法编码: {error}", cause=error)

        if isinstance(error, ConnectionRefusedError):
            return ConnectionRefused(host, port, f"{target} 拒绝连接", cause=error)

        # ssl.CertificateError 同时是 SSLError 和 ValueError 的子类
        if isinstance(error, ssl.SSLError):
            return HandshakeFailure(host, port, f"{target} TLS握手失败: {error}", cause=error)

        if isinstance(error, ValueError):
            return ParseFailure(host, port, f"无法解析 {target} 的证书: {error}", cause=error)

        if isinstance(error, OSError):
            if phase == "handshake":
                return HandshakeFailure(host, port, f"{target} TLS握手时连接中断: {error}", cause=error)
            return ConnectionFailure(host, port, f"无法连接到 {target}: {error}", cause=error)

        return FetchError(host, port, f"获取 {target} 证书时发生未知错误: {error}", cause=error)

    def handle_fetch_error(self, error: FetchError) -> Dict[str, Any]:
        """
        处理证书获取错误

        Args:
            error: 归类后的错误

        Returns:
            Dict[str, Any]: 错误处理结果
        """
        error_info = {
            'host': error.host,
            'port': error.port,
            'error_type': error.kind,
            'error_message': error.message,
            'cause': error.cause_message,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'suggested_action': self._get_suggested_action(error)
        }

        self.logger.debug(f"主机 {error.host}:{error.port} 建议: {error_info['suggested_action']}")

        return error_info

    def _get_suggested_action(self, error: FetchError) -> str:
        """
        获取错误的建议处理方案

        Args:
            error: 归类后的错误

        Returns:
            str: 建议的处理方案
        """
        if isinstance(error, FetchTimeout):
            if error.phase == "handshake":
                return "服务器未完成TLS握手，检查端口是否为TLS服务或增加握手超时时间"
            return "检查网络连接，考虑增加超时时间"
        elif isinstance(error, DNSFailure):
            return "检查主机名是否正确，DNS服务器是否可用"
        elif isinstance(error, ConnectionRefused):
            return "检查目标服务器是否运行，端口是否正确"
        elif isinstance(error, ConnectionFailure):
            message = error.message.lower()
            if 'network is unreachable' in message:
                return "网络不可达，检查网络连接和路由"
            elif 'no route to host' in message:
                return "无法路由到主机，检查防火墙和网络配置"
            return "检查网络连接和服务器状态"
        elif isinstance(error, HandshakeFailure):
            if 'certificate verify failed' in error.message.lower():
                return "证书验证失败，可去掉 --verify 以诊断模式查看证书"
            return "TLS握手失败，检查TLS版本兼容性及端口是否为TLS服务"
        elif isinstance(error, NoCertificate):
            return "服务器未提供证书，检查服务器TLS配置"
        elif isinstance(error, ParseFailure):
            return "证书格式异常，使用 openssl x509 手动检查证书内容"
        else:
            return "检查网络连接和服务器状态"

    def get_error_statistics(self, error_list: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        获取错误统计信息

        Args:
            error_list: 错误信息列表

        Returns:
            Dict[str, Any]: 错误统计
        """
        if not error_list:
            return {
                'total_errors': 0,
                'error_types': {},
                'most_common_error': None,
                'most_common_error_count': 0
            }

        error_types = {}
        for error_info in error_list:
            error_type = error_info.get('error_type', 'Unknown')
            error_types[error_type] = error_types.get(error_type, 0) + 1

        # 找出最常见的错误类型
        most_common_error = max(error_types.items(), key=lambda x: x[1])

        return {
            'total_errors': len(error_list),
            'error_types': error_types,
            'most_common_error': most_common_error[0],
            'most_common_error_count': most_common_error[1]
        }
