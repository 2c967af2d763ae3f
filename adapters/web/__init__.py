"""
웹 어댑터 패키지
"""
