# chirp/api/fields.py
from marshmallow import fields, ValidationError

from chirp.utils.datetime_utils import DateTimeUtils


class UtcDateTime(fields.DateTime):
    """
    응답의 시각은 항상 UTC ISO 문자열("...Z")로 내보내고,
    읽을 때는 오프셋이 없는 값도 UTC 로 간주합니다.
    """
    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return DateTimeUtils.to_iso_string(value)

    def _deserialize(self, value, attr, data, **kwargs):
        if not isinstance(value, str):
            raise ValidationError("Not a valid datetime.")
        try:
            return DateTimeUtils.parse_iso_datetime(value)
        except ValueError:
            raise ValidationError("Not a valid datetime.")
