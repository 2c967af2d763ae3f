"""
TLS 옵션 어댑터

ResolvedConfig의 TLS 자료를 uvicorn이 읽을 수 있는 PEM 파일로 기록하고
ssl_* 실행 옵션을 만듭니다. PFX 번들은 PKCS#12 로더로 풀어 PEM으로 변환합니다.
"""

import os
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    pkcs12,
)

from core.domain.entities import TlsCertKeyPair, TlsConfig, TlsPfxBundle
from core.domain.errors import TlsMaterialError


def _write_private(path: Path, data: bytes) -> None:
    """소유자만 읽을 수 있는 파일로 기록"""
    fd = os.open(str(path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as f:
        f.write(data)


def convert_pfx_to_pem(bundle: TlsPfxBundle) -> Tuple[bytes, bytes]:
    """
    PFX 번들을 (인증서 체인 PEM, 개인키 PEM)으로 변환합니다.

    Raises:
        TlsMaterialError: 암호가 틀렸거나 번들에 인증서/키가 없는 경우
    """
    try:
        key, cert, additional_certs = pkcs12.load_key_and_certificates(
            bundle.pfx,
            bundle.passphrase.encode(),
        )
    except ValueError as e:
        raise TlsMaterialError("<pfx bundle>", "PFX", str(e)) from e

    if key is None or cert is None:
        raise TlsMaterialError("<pfx bundle>", "PFX", "인증서 또는 개인키가 없습니다")

    chain = cert.public_bytes(Encoding.PEM)
    for extra in additional_certs or []:
        chain += extra.public_bytes(Encoding.PEM)

    key_pem = key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption())
    return chain, key_pem


def build_ssl_options(tls: Optional[TlsConfig], directory: Union[str, Path]) -> Dict[str, str]:
    """
    TLS 자료를 directory에 기록하고 uvicorn ssl 옵션을 반환합니다.

    TLS가 설정되지 않았으면 빈 딕셔너리를 반환합니다.
    """
    if tls is None:
        return {}

    if isinstance(tls, TlsCertKeyPair):
        cert_pem, key_pem = tls.cert, tls.key
    else:
        cert_pem, key_pem = convert_pfx_to_pem(tls)

    directory = Path(directory)
    cert_path = directory / "cert.pem"
    key_path = directory / "key.pem"
    _write_private(cert_path, cert_pem)
    _write_private(key_path, key_pem)

    return {"ssl_certfile": str(cert_path), "ssl_keyfile": str(key_path)}
