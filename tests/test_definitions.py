from datetime import datetime

import pytest

from pyjamf import config
from pyjamf.api import StaticConnection
from pyjamf.api.definitions import (
    DataType, InputType, DeclaredType, ExtensionAttributeDefinition, DefinitionRegistry)
from pyjamf.errors import InvalidDataError, NotFoundError, UnsupportedError
from pyjamf.validate import BLANK
from conftest import COMPUTER_EA_DEFINITIONS


def test_data_type_spellings():
    """
    Definitions say "Integer", values on objects say "Number".
    """
    assert DataType('Integer') is DataType.integer
    assert DataType('Number') is DataType.integer
    assert DataType('date') is DataType.date
    assert DataType.from_jamf('Unknown') is None
    assert InputType('pop-up menu') is InputType.popup_menu


def test_definition_model():
    popup = ExtensionAttributeDefinition.from_api(COMPUTER_EA_DEFINITIONS[0])
    assert popup.name == 'Department'
    assert popup.input_kind == InputType.popup_menu
    assert popup.popup_choices == ['Sales', 'Engineering']
    assert popup.declared_type == DeclaredType(DataType.string, ('Sales', 'Engineering'))

    number = ExtensionAttributeDefinition.from_api(COMPUTER_EA_DEFINITIONS[1])
    assert number.popup_choices == []
    assert number.declared_type == DeclaredType(DataType.integer)

    # Definitions are never changed by us
    with pytest.raises(AttributeError):
        number.name = 'Other'


def test_coerce_popup():
    declared = DeclaredType(DataType.string, ('Sales', 'Engineering'))
    assert declared.coerce('Sales') == 'Sales'
    assert declared.coerce(BLANK) == BLANK

    with pytest.raises(UnsupportedError) as excinfo:
        declared.coerce('Marketing', name='Department')
    assert "'Sales' 'Engineering'" in str(excinfo.value)


def test_coerce_integer():
    declared = DeclaredType(DataType.integer)
    assert declared.coerce(3) == 3
    assert declared.coerce(BLANK) == BLANK

    for bad in ['3', 3.5, True]:
        with pytest.raises(InvalidDataError):
            declared.coerce(bad)


def test_coerce_date():
    declared = DeclaredType(DataType.date)
    assert declared.coerce('2021-06-30 10:00:00') == datetime(2021, 6, 30, 10, 0, 0)
    assert declared.coerce(datetime(2021, 6, 30)) == datetime(2021, 6, 30)

    with pytest.raises(InvalidDataError):
        declared.coerce('next tuesday')


def test_coerce_boolean_and_string():
    assert DeclaredType(DataType.boolean).coerce('yes') is True
    assert DeclaredType(DataType.string).coerce('anything') == 'anything'


def test_parse_is_best_effort():
    """
    Values from the server are converted where possible, and kept otherwise.
    """
    assert DeclaredType(DataType.integer).parse('12') == 12
    assert DeclaredType(DataType.integer).parse('twelve') == 'twelve'
    assert DeclaredType(DataType.integer).parse('') == ''
    assert DeclaredType(DataType.date).parse('2021-06-30') == datetime(2021, 6, 30)
    assert DeclaredType(DataType.date).parse('sometime') == 'sometime'
    assert DeclaredType(DataType.date).parse(None) is None


def test_parse_strict_dates():
    config.configure(strict_dates=True)
    with pytest.raises(InvalidDataError):
        DeclaredType(DataType.date).parse('sometime')


def test_registry_fetch(api):
    definition = api.definitions.fetch('computer', 'department')
    assert definition.name == 'Department'
    assert definition.id == 1

    with pytest.raises(NotFoundError):
        api.definitions.fetch('computer', 'Color')
    with pytest.raises(NotFoundError):
        api.definitions.fetch('mobile_device', 'Department')


def test_registry_caches():
    api = StaticConnection(ea_definitions={'computer': COMPUTER_EA_DEFINITIONS[:1]})
    registry = DefinitionRegistry(api)
    assert list(registry.all('computer')) == ['Department']

    api.ea_definitions['computer'] = COMPUTER_EA_DEFINITIONS
    assert list(registry.all('computer')) == ['Department']
    with pytest.raises(NotFoundError):
        registry.fetch('computer', 'Owner')

    assert registry.fetch('computer', 'Owner', refresh=True).id == 4

    api.ea_definitions['computer'] = []
    registry.refresh('computer')
    assert registry.all('computer') == {}


def test_registry_without_cache():
    api = StaticConnection(ea_definitions={'computer': COMPUTER_EA_DEFINITIONS[:1]})
    registry = DefinitionRegistry(api, cache=False)
    assert list(registry.all('computer')) == ['Department']
    api.ea_definitions['computer'] = COMPUTER_EA_DEFINITIONS
    assert registry.fetch('computer', 'owner').name == 'Owner'


def test_registry_accepts_models():
    definition = ExtensionAttributeDefinition(id=9, name='Color', data_type=DataType.string)
    api = StaticConnection(ea_definitions={'user': [definition]})
    assert api.definitions.fetch('user', 'COLOR') is definition
