# chirp/utils/datetime_utils.py
"""
프로젝트 전체에서 일관된 시간/날짜 처리를 위한 중앙화된 유틸리티 모듈

이 모듈의 목적:
1. 모든 시간 값을 UTC timezone-aware datetime 으로 통일
2. Firestore 저장/읽기 변환
3. 게시글 작성 시각의 상대 시간 표기("2 hours ago")
"""

import logging
from datetime import datetime, date, timezone, time
from typing import Any, Optional
from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

# 상대 시간 구간표. (라벨, 최대값, 단위)
# 단위가 None 인 구간은 직전 구간에서 계산한 값을 그대로 사용합니다.
_RELATIVE_THRESHOLDS = (
    ('s', 44, 'second'),
    ('m', 89, None),
    ('mm', 44, 'minute'),
    ('h', 89, None),
    ('hh', 21, 'hour'),
    ('d', 35, None),
    ('dd', 25, 'day'),
    ('M', 45, None),
    ('MM', 10, 'month'),
    ('y', 17, None),
    ('yy', None, 'year'),
)

_RELATIVE_LABELS = {
    's': 'a few seconds',
    'm': 'a minute',
    'mm': '%d minutes',
    'h': 'an hour',
    'hh': '%d hours',
    'd': 'a day',
    'dd': '%d days',
    'M': 'a month',
    'MM': '%d months',
    'y': 'a year',
    'yy': '%d years',
}

_UNIT_SECONDS = {
    'second': 1,
    'minute': 60,
    'hour': 60 * 60,
    'day': 24 * 60 * 60,
}


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def ensure_utc(dt: datetime) -> datetime:
        """timezone-naive 값은 UTC 로 간주하고, aware 값은 UTC 로 변환합니다."""
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        ISO 포맷 문자열을 datetime 객체로 파싱

        지원 포맷:
        - 2024-01-15T10:30:00Z
        - 2024-01-15T10:30:00+09:00
        - 2024-01-15T10:30:00.123456Z
        - 2024-01-15T10:30:00
        """
        try:
            if not iso_string:
                raise ValueError("빈 문자열은 파싱할 수 없습니다")

            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'

            dt = dateutil_parser.isoparse(iso_string)
            return DateTimeUtils.ensure_utc(dt)

        except Exception as e:
            logger.error(f"ISO datetime 파싱 실패: {iso_string} - {e}")
            raise ValueError(f"잘못된 ISO 날짜 형식입니다: {iso_string}")

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """datetime 객체를 ISO 포맷 문자열로 변환 (Z 접미사 포함)"""
        return DateTimeUtils.ensure_utc(dt).isoformat().replace('+00:00', 'Z')

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Firestore 저장을 위해 객체의 날짜/시간 필드를 변환

        변환 규칙:
        - date -> datetime (00:00:00 UTC)
        - timezone-naive datetime -> timezone-aware datetime (UTC)
        - dict/list 내부 재귀적 변환
        """
        if isinstance(obj, datetime):
            return DateTimeUtils.ensure_utc(obj)
        if isinstance(obj, date):
            return datetime.combine(obj, time.min).replace(tzinfo=timezone.utc)
        if isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """
        Firestore에서 읽은 데이터의 datetime 필드를 UTC aware datetime 으로 정규화.
        변환 실패 시 원본 객체를 반환하고 로그만 남깁니다.
        """
        try:
            if isinstance(obj, datetime):
                return DateTimeUtils.ensure_utc(obj)
            if isinstance(obj, dict):
                return {k: DateTimeUtils.from_firestore(v) for k, v in obj.items()}
            if isinstance(obj, list):
                return [DateTimeUtils.from_firestore(item) for item in obj]
            return obj
        except Exception as e:
            logger.error(f"Firestore 읽기 변환 실패: {obj} ({type(obj)}) - {e}")
            return obj

    @staticmethod
    def _diff(later: datetime, earlier: datetime, unit: str) -> float:
        """later - earlier 를 unit 단위의 실수로 반환합니다. 월/년은 달력 기준입니다."""
        if unit in _UNIT_SECONDS:
            return (later - earlier).total_seconds() / _UNIT_SECONDS[unit]

        sign = 1
        if later < earlier:
            later, earlier = earlier, later
            sign = -1
        delta = relativedelta(later, earlier)
        whole_months = delta.years * 12 + delta.months
        anchor = earlier + relativedelta(months=whole_months)
        next_anchor = earlier + relativedelta(months=whole_months + 1)
        fraction = (later - anchor).total_seconds() / (next_anchor - anchor).total_seconds()
        months = whole_months + fraction
        if unit == 'year':
            return sign * months / 12
        return sign * months

    @staticmethod
    def from_now(value: datetime, now: Optional[datetime] = None) -> str:
        """
        작성 시각을 사람이 읽기 쉬운 상대 시간으로 변환합니다.

        예: 30초 전 -> "a few seconds ago", 2시간 전 -> "2 hours ago",
        미래 시각 -> "in 3 days"
        """
        now = DateTimeUtils.ensure_utc(now or DateTimeUtils.now())
        value = DateTimeUtils.ensure_utc(value)

        result = 0.0
        amount = 0
        label = 'yy'
        for index, (key, limit, unit) in enumerate(_RELATIVE_THRESHOLDS):
            if unit:
                result = DateTimeUtils._diff(value, now, unit)
            amount = _round_half_up(abs(result))
            if limit is None or amount <= limit:
                label = key
                # 1 minutes -> a minute, 0 seconds -> a few seconds
                if amount <= 1 and index > 0:
                    label = _RELATIVE_THRESHOLDS[index - 1][0]
                break

        text = _RELATIVE_LABELS[label]
        if '%d' in text:
            text = text % amount
        if result > 0:
            return f"in {text}"
        return f"{text} ago"
