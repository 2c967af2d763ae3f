"""
Usecases 패키지

런타임 설정 해석 단계들을 구현합니다.
"""
