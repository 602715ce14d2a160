"""
测试公共工具：生成测试证书
"""
from datetime import datetime, timezone, timedelta
from typing import List, Optional

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID


def make_certificate(common_name: Optional[str] = "example.com",
                     issuer_cn: Optional[str] = "Test CA",
                     dns_names: Optional[List[str]] = None,
                     organization: str = "Example Org",
                     not_before: Optional[datetime] = None,
                     days_valid: int = 90):
    """
    生成自签名测试证书

    Returns:
        tuple: (证书对象, 私钥)
    """
    key = ec.generate_private_key(ec.SECP256R1())

    subject_attrs = []
    if common_name is not None:
        subject_attrs.append(x509.NameAttribute(NameOID.COMMON_NAME, common_name))
    subject_attrs.append(x509.NameAttribute(NameOID.ORGANIZATION_NAME, organization))

    issuer_attrs = []
    if issuer_cn is not None:
        issuer_attrs.append(x509.NameAttribute(NameOID.COMMON_NAME, issuer_cn))
    issuer_attrs.append(x509.NameAttribute(NameOID.COUNTRY_NAME, "US"))

    not_before = not_before or datetime.now(timezone.utc) - timedelta(days=1)

    builder = (
        x509.CertificateBuilder()
        .subject_name(x509.Name(subject_attrs))
        .issuer_name(x509.Name(issuer_attrs))
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_before + timedelta(days=days_valid))
    )

    if dns_names is not None:
        builder = builder.add_extension(
            x509.SubjectAlternativeName([x509.DNSName(name) for name in dns_names]),
            critical=False
        )

    cert = builder.sign(key, hashes.SHA256())
    return cert, key


def make_der(**kwargs) -> bytes:
    cert, _ = make_certificate(**kwargs)
    return cert.public_bytes(serialization.Encoding.DER)


@pytest.fixture
def tls_cert_files(tmp_path):
    """写入 localhost 证书与私钥，返回 (certfile, keyfile, 证书对象)"""
    cert, key = make_certificate(
        common_name="localhost",
        issuer_cn="R11",
        dns_names=["localhost"]
    )

    certfile = tmp_path / "cert.pem"
    keyfile = tmp_path / "key.pem"
    certfile.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    keyfile.write_bytes(key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption()
    ))

    return str(certfile), str(keyfile), cert
