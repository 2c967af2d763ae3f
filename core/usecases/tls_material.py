"""
TLS 자료 로드 유즈케이스

인증서/키 쌍 또는 PFX 번들을 디스크에서 읽어옵니다.

평가 순서:
1. HTTPS_SSL_CERT_PATH + HTTPS_SSL_KEY_PATH -> 인증서/키 쌍
2. HTTPS_PFX_PASSPHRASE + HTTPS_PFX_FILE_PATH -> PFX 번들

두 조건이 모두 충족되면 나중에 평가되는 PFX 번들이 결과가 됩니다.
파일 읽기에 실패하면 HTTP로 대체하지 않고 TlsMaterialError로 중단합니다.
"""

from typing import Optional

from ..domain.entities import TlsCertKeyPair, TlsConfig, TlsPfxBundle, ValidatedEnvironment
from ..domain.errors import TlsMaterialError
from ..domain.ports import FileReaderPort, LoggerPort


class TlsMaterialLoader:
    """TLS 자료 로더"""

    def __init__(self, file_reader: FileReaderPort, logger: LoggerPort):
        self.file_reader = file_reader
        self.logger = logger

    async def _read(self, path: str, material: str) -> bytes:
        try:
            return await self.file_reader.read_bytes(path)
        except OSError as e:
            self.logger.error(f"{material} 파일 읽기 실패: {path}")
            raise TlsMaterialError(path, material, e.strerror or str(e)) from e

    async def load(self, validated: ValidatedEnvironment) -> Optional[TlsConfig]:
        """
        TLS 자료를 로드합니다.

        Returns:
            TlsCertKeyPair, TlsPfxBundle 또는 None (평문 HTTP)

        Raises:
            TlsMaterialError: 인증서, 키, PFX 파일을 읽을 수 없는 경우
        """
        tls: Optional[TlsConfig] = None

        if validated.https_ssl_cert_path and validated.https_ssl_key_path:
            cert = await self._read(validated.https_ssl_cert_path, "SSL 인증서")
            key = await self._read(validated.https_ssl_key_path, "SSL 개인키")
            tls = TlsCertKeyPair(cert=cert, key=key)
            self.logger.info(f"SSL 인증서/키 로드 완료: {validated.https_ssl_cert_path}")

        if validated.https_pfx_passphrase and validated.https_pfx_file_path:
            if tls is not None:
                self.logger.warning("SSL 인증서/키와 PFX가 모두 설정되어 PFX 설정을 사용합니다")
            pfx = await self._read(validated.https_pfx_file_path, "PFX")
            tls = TlsPfxBundle(pfx=pfx, passphrase=validated.https_pfx_passphrase)
            self.logger.info(f"PFX 번들 로드 완료: {validated.https_pfx_file_path}")

        if tls is None:
            self.logger.debug("TLS 설정이 없어 평문 HTTP로 동작합니다")
        return tls
