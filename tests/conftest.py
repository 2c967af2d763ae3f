import datetime
import logging

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import (
    BestAvailableEncryption,
    Encoding,
    NoEncryption,
    PrivateFormat,
    pkcs12,
)
from cryptography.x509.oid import NameOID

import config.adapters as config_adapters
from adapters.logger import ROOT_LOGGER_NAME
from core.domain.ports import LoggerPort

PFX_PASSPHRASE = "gateway-secret"


class RecordingLogger(LoggerPort):
    """메시지를 레벨별로 기록하는 테스트용 로거"""

    def __init__(self):
        self.records = []

    def info(self, message: str, **kwargs) -> None:
        self.records.append(("info", message))

    def warning(self, message: str, **kwargs) -> None:
        self.records.append(("warning", message))

    def error(self, message: str, **kwargs) -> None:
        self.records.append(("error", message))

    def debug(self, message: str, **kwargs) -> None:
        self.records.append(("debug", message))

    def messages(self, level: str):
        return [message for record_level, message in self.records if record_level == level]


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def minimal_env():
    return {
        "NODE_ENV": "development",
        "SERVICE_HOST": "127.0.0.1",
        "SERVICE_PORT": "8204",
    }


@pytest.fixture(autouse=True)
def reset_global_config(monkeypatch):
    monkeypatch.setattr(config_adapters, "_config", None)


@pytest.fixture(autouse=True)
def reset_app_logger():
    root = logging.getLogger(ROOT_LOGGER_NAME)
    saved_level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(saved_level)


@pytest.fixture
def clean_environ(monkeypatch):
    for name in config_adapters.RawEnvironmentSettings.model_fields:
        monkeypatch.delenv(name, raising=False)


def _self_signed_certificate():
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "localhost")])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(minutes=1))
        .not_valid_after(now + datetime.timedelta(days=1))
        .sign(key, hashes.SHA256())
    )
    return key, cert


@pytest.fixture(scope="session")
def certificate():
    return _self_signed_certificate()


@pytest.fixture
def cert_key_files(tmp_path, certificate):
    key, cert = certificate
    cert_path = tmp_path / "server.crt"
    key_path = tmp_path / "server.key"
    cert_path.write_bytes(cert.public_bytes(Encoding.PEM))
    key_path.write_bytes(key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()))
    return cert_path, key_path


@pytest.fixture
def pfx_file(tmp_path, certificate):
    key, cert = certificate
    pfx_path = tmp_path / "server.pfx"
    pfx_path.write_bytes(
        pkcs12.serialize_key_and_certificates(
            b"gateway",
            key,
            cert,
            None,
            BestAvailableEncryption(PFX_PASSPHRASE.encode()),
        )
    )
    return pfx_path
