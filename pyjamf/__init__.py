"""Jamf Pro objects for Python: typed, validated, and aware of their changes."""

from pyjamf.errors import (
    JamfError, InvalidDataError, AlreadyExistsError, NotFoundError, UnsupportedError,
    MissingDataError)
from pyjamf.validate import BLANK
from pyjamf.utils import ci_fetch_string
