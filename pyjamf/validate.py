"""A collection of functions for validating values.

Mostly, these ensure the validity of data being assigned to the properties
of model instances; see `pyjamf.models.attrib(validate=...)`.

Each of them takes the value and an optional custom error message. They
either raise an `InvalidDataError` if the value isn't valid, or return a
standardized form of the input (e.g. a real `bool` when given ``'yes'``).
"""

import enum
import logging
import re

from pyjamf.errors import InvalidDataError, AlreadyExistsError, UnsupportedError


logger = logging.getLogger(__name__)


# The designated "no value" for extension attributes and similar text data.
BLANK = ''

MAC_ADDR_RE = re.compile(r'[a-f0-9]{2}(:[a-f0-9]{2}){5}', re.IGNORECASE)

INTEGER_RE = re.compile(r'-?[0-9]+')

TRUE_RE = re.compile(r'true|yes', re.IGNORECASE)
FALSE_RE = re.compile(r'false|no', re.IGNORECASE)


def is_integer_string(value) -> bool:
    return isinstance(value, str) and INTEGER_RE.fullmatch(value) is not None


def mac_address(val, msg=None):
    """Validate the format and content of a MAC address."""
    msg = msg or f"Not a valid MAC address: '{val}'"
    if not isinstance(val, str) or not MAC_ADDR_RE.fullmatch(val):
        raise InvalidDataError(msg)
    return val


def ip_address(val, msg=None):
    """Validate the format and content of an IPv4 address."""
    msg = msg or f"Not a valid IPv4 address: '{val}'"
    if not isinstance(val, str):
        raise InvalidDataError(msg)

    parts = val.strip().split('.')
    if len(parts) != 4:
        raise InvalidDataError(msg)
    for part in parts:
        if not is_integer_string(part) or not 0 <= int(part) <= 255:
            raise InvalidDataError(msg)
    return val


def unique_identifier(klass, identifier, val, msg=None, *, api):
    """Validate that `val` is not already used as `identifier` by any
    object of `klass`.

    e.g. when klass is `Computer`, identifier is 'name' and val is 'foo',
    this raises when a computer named 'foo' exists. The list of existing
    objects always comes fresh from `api`.
    """
    msg = msg or f"A {getattr(klass, '__name__', klass)} already exists with {identifier} '{val}'"
    existing = [item.get(identifier) for item in api.list_all(klass, refresh=True)]
    logger.debug(f'Checking {identifier}={val!r} against {len(existing)} existing objects')
    if val in existing:
        raise AlreadyExistsError(msg)
    return val


def boolean(val, msg=None):
    """Confirm that the given value is a boolean, accepting the strings
    'true', 'false', 'yes' and 'no' in any case (and enum members of
    those names, our equivalent of symbols).
    """
    msg = msg or 'Value must be boolean true or false'
    if val is True or val is False:
        return val

    text = val.name if isinstance(val, enum.Enum) else val
    if isinstance(text, str):
        if TRUE_RE.fullmatch(text):
            return True
        if FALSE_RE.fullmatch(text):
            return False
    raise InvalidDataError(msg)


def integer(val, msg=None):
    """Confirm that a value is an integer or a string representation of an
    integer. Return the integer.
    """
    msg = msg or 'Value must be an integer'
    if is_integer_string(val):
        val = int(val)
    if isinstance(val, bool) or not isinstance(val, int):
        raise InvalidDataError(msg)
    return val


def non_empty_string(val, msg=None):
    msg = msg or 'value must be a non-empty String'
    if not isinstance(val, str) or not val:
        raise InvalidDataError(msg)
    return val


def stripped_string(val, msg=None):
    """Confirm that a value is a string. Return it without surrounding
    whitespace.
    """
    msg = msg or "value must be a String"
    if not isinstance(val, str):
        raise InvalidDataError(msg)
    return val.strip()


def one_of(choices, msg=None):
    """Make a validator which only accepts the given choices.

    The value is compared as a string; unlike the other validators, this
    raises an `UnsupportedError`, listing the valid choices.
    """
    choices = [str(c) for c in choices]

    def validator(val):
        text = BLANK if val is None else str(val)
        if text not in choices:
            choice_list = "' '".join(choices)
            raise UnsupportedError(msg or f"The value must be one of: '{choice_list}'")
        return val
    return validator
