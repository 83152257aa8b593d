import datetime

import iso8601
from marshmallow import fields

from pyjamf.config import get_settings


def parse_jamf_datetime(value):
    """
    Parse the dates Jamf gives us. The Classic API uses "2019-02-04 21:09:31",
    the Jamf Pro API uses ISO 8601 ("2019-02-04T21:09:31.661Z"); both work.

    Naive strings give naive datetimes, like the server meant them. A `date`
    is widened to midnight. Raises a `ValueError` if this is not a date.
    """
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    if not isinstance(value, str):
        raise ValueError(f'Not a date: {value!r}')
    return iso8601.parse_date(value.strip(), default_timezone=None)


def format_jamf_datetime(value, date_format=None):
    """Render a date the way the Classic API expects it in XML."""
    return value.strftime(date_format or get_settings().date_format)


def serialize_iso8601(date):
    """
    The Jamf Pro API wants ISO 8601. We drop the fractions, and print
    UTC as "Z".
    """
    date = date.replace(microsecond=0)
    if date.utcoffset() == datetime.timedelta(0):
        return date.replace(tzinfo=None).isoformat() + 'Z'
    return date.isoformat()


class JamfDateTime(fields.DateTime):
    """
    marshmallow's DateTime, but reading both of the formats Jamf uses, and
    treating an empty string (which the server sends for "no date") as None.
    """

    SERIALIZATION_FUNCS = {
        **fields.DateTime.SERIALIZATION_FUNCS,
        'jamf': serialize_iso8601
    }

    DESERIALIZATION_FUNCS = {
        **fields.DateTime.DESERIALIZATION_FUNCS,
        'jamf': parse_jamf_datetime
    }

    DEFAULT_FORMAT = 'jamf'

    def _deserialize(self, value, attr, data, **kwargs):
        if value == '':
            return None
        if isinstance(value, datetime.datetime):
            return value
        return super()._deserialize(value, attr, data, **kwargs)
