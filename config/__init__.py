"""
Config 패키지

프로세스 경계에서 환경 변수를 읽고 런타임 설정을 초기화합니다.
- 원시 환경 변수 소스: Pydantic Settings (.env 파일 포함)
- 전역 설정: 프로세스 시작 시 한 번 초기화되는 ResolvedConfig
"""
