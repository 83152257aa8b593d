"""
Extension attribute definitions: the admin-defined custom fields of
computers, mobile devices and users, with their declared data types.

Objects carrying extension attribute values (see `Extendable`) consult these
definitions whenever a value is set, via the `DefinitionRegistry` of their
API connection.
"""

import enum
import logging
from typing import Dict, List, Optional, Tuple

import attr

from pyjamf import validate
from pyjamf.config import get_settings
from pyjamf.errors import InvalidDataError, NotFoundError
from pyjamf.models import model, attrib, JamfObject, Immutable, parse_jamf_datetime
from pyjamf.utils import ci_fetch_string
from pyjamf.validate import BLANK


logger = logging.getLogger(__name__)


class DataType(enum.Enum):
    string = 'String'
    integer = 'Integer'
    date = 'Date'
    boolean = 'Boolean'

    @classmethod
    def _missing_(cls, value):
        # Extension attribute definitions call the numeric type "Integer",
        # but the values that come with extendable objects call it "Number".
        if isinstance(value, str):
            if value.casefold() == 'number':
                return cls.integer
            for member in cls:
                if member.value.casefold() == value.casefold():
                    return member
        return None

    @classmethod
    def from_jamf(cls, value) -> Optional["DataType"]:
        """Like `DataType(value)`, but None for unknown types."""
        try:
            return cls(value)
        except ValueError:
            return None


class InputType(enum.Enum):
    text_field = 'Text Field'
    popup_menu = 'Pop-up Menu'
    script = 'script'
    ldap_mapping = 'LDAP Attribute Mapping'
    directory_service_mapping = 'Directory Service Attribute Mapping'

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value.casefold() == value.casefold():
                    return member
        return None


def coerce_date(value, name):
    try:
        return parse_jamf_datetime(value)
    except ValueError:
        raise InvalidDataError(f"The value for {name} must be a date, not '{value}'") from None


def coerce_integer(value, name):
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidDataError(f'The value for {name} must be an integer')
    return value


def coerce_boolean(value, name):
    return validate.boolean(value, f'The value for {name} must be boolean true or false')


def coerce_string(value, name):
    return value


# Used when the value is set by the programmer. Those are strict.
COERCERS = {
    DataType.string: coerce_string,
    DataType.integer: coerce_integer,
    DataType.date: coerce_date,
    DataType.boolean: coerce_boolean,
}


def parse_date(value):
    try:
        return parse_jamf_datetime(value)
    except ValueError:
        if get_settings().strict_dates:
            raise InvalidDataError(f"Not a valid date: '{value}'") from None
        logger.warning(f'Keeping unparseable date value {value!r}')
        return value


def parse_integer(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f'Keeping non-numeric value {value!r}')
        return value


def parse_boolean(value):
    try:
        return validate.boolean(value)
    except InvalidDataError:
        return value


# Used when the value comes from the server. Those do their best.
PARSERS = {
    DataType.integer: parse_integer,
    DataType.date: parse_date,
    DataType.boolean: parse_boolean,
}


@attr.s(frozen=True, slots=True, auto_attribs=True)
class DeclaredType:
    """The declared type of an extension attribute: its data type, and for
    pop-up menus, the allowed choices.
    """

    data_type: DataType = DataType.string
    choices: Optional[Tuple[str, ...]] = None

    @property
    def is_popup(self) -> bool:
        return self.choices is not None

    def coerce(self, value, *, name='value'):
        """Validate a value the programmer wants to set, and return it in the
        form we store it.

        Pop-up menus accept one of their choices, or `BLANK`. Unless blank,
        the value must then match the data type.
        """
        if self.is_popup and value != BLANK:
            choice_list = "' '".join(self.choices)
            validate.one_of(
                self.choices, f"The value for {name} must be one of: '{choice_list}'")(value)

        if value == BLANK:
            return value
        return COERCERS[self.data_type](value, name)

    def parse(self, value):
        """Convert a value as it came from the server. Empty values stay empty."""
        if value is None or value == BLANK:
            return value
        parser = PARSERS.get(self.data_type)
        return parser(value) if parser else value


@model(camelcase=False)
class InputTypeInfo(Immutable, JamfObject):
    type: InputType = attrib()
    popup_choices: List[str] = attrib(factory=list)


@model(camelcase=False)
class ExtensionAttributeDefinition(Immutable, JamfObject):
    id: int = attrib(identifier=True)
    name: str = attrib(required=True)
    description: str = attrib()
    data_type: DataType = attrib(default=DataType.string)
    input_type: InputTypeInfo = attrib()
    enabled: bool = attrib()

    @property
    def input_kind(self) -> InputType:
        if self.input_type is None or self.input_type.type is None:
            return InputType.text_field
        return self.input_type.type

    @property
    def popup_choices(self) -> List[str]:
        if self.input_kind != InputType.popup_menu:
            return []
        return list(self.input_type.popup_choices or [])

    @property
    def declared_type(self) -> DeclaredType:
        choices = tuple(self.popup_choices) if self.input_kind == InputType.popup_menu else None
        return DeclaredType(data_type=self.data_type or DataType.string, choices=choices)


class DefinitionRegistry:
    """Resolves extension attribute definitions by resource type and name.

    The definitions of a resource type are fetched from the API connection
    the first time they are needed, and kept, unless caching is disabled in
    the settings.
    """

    def __init__(self, api, *, cache=None):
        self.api = api
        self.cache = get_settings().cache_definitions if cache is None else cache
        self._definitions: Dict[str, Dict[str, ExtensionAttributeDefinition]] = {}

    def all(self, resource_type, *, refresh=False) -> Dict[str, ExtensionAttributeDefinition]:
        if refresh or not self.cache or resource_type not in self._definitions:
            logger.debug(f'Loading {resource_type} extension attribute definitions')
            definitions = [
                item if isinstance(item, ExtensionAttributeDefinition)
                else ExtensionAttributeDefinition.from_api(item, api=self.api)
                for item in self.api.extension_attribute_definitions(resource_type)
            ]
            self._definitions[resource_type] = {d.name: d for d in definitions}
        return self._definitions[resource_type]

    def fetch(self, resource_type, name, *, refresh=False) -> ExtensionAttributeDefinition:
        """Raises `NotFoundError` if no such extension attribute is defined.

        Names match case-insensitively; the definition carries the name as
        it is defined on the server.
        """
        definitions = self.all(resource_type, refresh=refresh)
        defined_name = ci_fetch_string(definitions, name)
        if defined_name is None:
            raise NotFoundError(f"No {resource_type} extension attribute named '{name}'")
        return definitions[defined_name]

    def refresh(self, resource_type=None):
        if resource_type is None:
            self._definitions.clear()
        else:
            self._definitions.pop(resource_type, None)
