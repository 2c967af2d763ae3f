"""
Adapters 패키지

Core 포트를 구현하는 어댑터와 HTTP 부트스트랩 구성 요소를 포함합니다.
"""
