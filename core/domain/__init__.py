"""
Domain 패키지

런타임 설정 값 객체, 오류 타입, 포트 인터페이스를 정의합니다.
외부 의존성 없이 순수한 도메인 규칙만 포함합니다.

주요 엔티티:
- ValidatedEnvironment: 스키마 검증을 통과한 환경 변수
- ResolvedConfig: 서비스 시작 시 한 번 생성되는 최종 설정
- TlsCertKeyPair / TlsPfxBundle: TLS 자료
- RotationDescriptor: 로그 로테이션 파라미터
"""
