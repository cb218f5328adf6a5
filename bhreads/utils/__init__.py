"""
프로젝트 전체에서 공통으로 사용하는 유틸리티 함수 패키지
"""

from .datetime_utils import (
    DateTimeUtils,
    now,
    for_firestore, from_firestore,
)

__all__ = [
    'DateTimeUtils',
    'now',
    'for_firestore', 'from_firestore',
]
