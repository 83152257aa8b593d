from datetime import datetime
from typing import List

import attr
import pytest

from pyjamf.errors import InvalidDataError, MissingDataError
from pyjamf.models import model, attrib, JamfObject, Immutable, schema_of, is_mutable
from pyjamf.api import (
    Computer, ComputerGeneral, PrestagePurchasingInformation,
    ExtensionAttributeMigrationMappingChange, IdName)
from pyjamf import validate


@model
class Widget(JamfObject):
    id: int = attrib(identifier=True, readonly=True)
    name: str = attrib(required=True)
    mac: str = attrib(validate=validate.mac_address)
    enabled: bool = attrib(validate=validate.boolean)
    tags: List[str] = attrib(factory=list)


@model
class FrozenWidget(Immutable, JamfObject):
    id: int = attrib(identifier=True)
    name: str = attrib()


def test_schema_definition():
    """
    The decorator builds a static table of the properties.
    """
    schema = schema_of(Widget)
    assert schema.name == 'Widget'
    assert [p.name for p in schema] == ['id', 'name', 'mac', 'enabled', 'tags']
    assert schema.identifier == 'id'
    assert [p.name for p in schema.required] == ['name']
    assert schema['id'].readonly
    assert 'mac' in schema
    assert '_changes' not in schema
    assert schema.mutable

    # The same table, asked through an instance
    assert schema_of(Widget(name='x')) is schema


def test_schema_of_rejects_other_classes():
    with pytest.raises(TypeError):
        schema_of(dict)


def test_wire_keys():
    assert schema_of(PrestagePurchasingInformation)['po_number'].data_key == 'poNumber'
    assert schema_of(PrestagePurchasingInformation)['apple_care_id'].data_key == 'appleCareID'
    assert schema_of(ComputerGeneral)['serial_number'].data_key == 'serial_number'


def test_partial_data_loads():
    """
    We take what the server gives us; required is only enforced on save.
    """
    w = Widget.from_api({'id': 3, 'unknownKey': 1})
    assert w.id == 3
    assert w.name is None
    assert w.tags == []
    assert not w.has_unsaved_changes()


def test_bad_types_are_refused():
    with pytest.raises(InvalidDataError):
        Widget.from_api({'id': 'three'})


def test_change_tracking():
    w = Widget.from_api({'id': 3, 'name': 'a'})
    assert w.changed_fields() == []

    w.name = 'b'
    w.enabled = 'yes'
    w.name = 'c'
    assert w.changed_fields() == ['name', 'enabled']
    assert w.changes.needs_update
    assert w.has_unsaved_changes()
    # The validator normalized the value
    assert w.enabled is True

    assert w.to_api(changed_only=True) == {'name': 'c', 'enabled': True}

    w.reset_changes()
    assert not w.has_unsaved_changes()
    assert w.to_api(changed_only=True) == {}


def test_invalid_value_is_not_assigned():
    w = Widget(name='a')
    with pytest.raises(InvalidDataError):
        w.mac = 'nope'
    assert w.mac is None
    assert w.changed_fields() == []


def test_clear_without_validation():
    w = Widget(name='a', mac='00:3e:e1:c5:2a:10')
    w.mac = None
    assert w.mac is None
    assert w.changed_fields() == ['mac']


def test_readonly():
    w = Widget(id=1, name='a')
    with pytest.raises(AttributeError):
        w.id = 2
    assert w.id == 1


def test_undeclared_attributes():
    w = Widget(name='a')
    with pytest.raises(AttributeError):
        w.nickname = 'b'


def test_immutable():
    """
    No instance of an immutable type can be changed, however it was created.
    """
    assert not is_mutable(FrozenWidget)
    assert not schema_of(FrozenWidget).mutable

    for w in [FrozenWidget(id=1, name='a'), FrozenWidget.from_api({'id': 1, 'name': 'a'})]:
        with pytest.raises(attr.exceptions.FrozenInstanceError):
            w.name = 'b'
        with pytest.raises(AttributeError):
            w.id = 2
        assert w.name == 'a'

    assert not is_mutable(IdName(id=1, name='x'))


def test_immutable_is_inherited():
    @model
    class FrozenChild(FrozenWidget):
        extra: str = attrib()

    assert not is_mutable(FrozenChild)
    with pytest.raises(AttributeError):
        FrozenChild(extra='a').extra = 'b'


def test_validate_required():
    with pytest.raises(MissingDataError) as excinfo:
        Widget().validate()
    assert excinfo.value.missing == ['name']

    # Blank counts as missing, too
    with pytest.raises(MissingDataError):
        Widget(name='').validate()

    Widget(name='a').validate()


def test_validate_reruns_validators():
    """
    Data from the server is not validated when loaded, but before saving.
    """
    w = Widget.from_api({'name': 'a', 'mac': 'bogus'})
    with pytest.raises(InvalidDataError):
        w.validate()


def test_validate_nested():
    computer = Computer(general=ComputerGeneral())
    with pytest.raises(MissingDataError):
        computer.validate()


def test_identifier():
    assert Widget(id=5).identifier == 5
    assert PrestagePurchasingInformation(id=9).identifier == 9
    assert ExtensionAttributeMigrationMappingChange().identifier is None


def test_oapi_round_trip():
    data = {
        'id': 1,
        'isLeased': False,
        'isPurchased': True,
        'appleCareID': 'abc',
        'poNumber': '53-1',
        'vendor': 'Example Corp',
        'purchasePrice': '$500',
        'lifeExpectancy': 5,
        'purchasingAccount': 'Accounting',
        'purchasingContact': 'Mary',
        'leaseDate': '2019-01-01',
        'poDate': '2019-01-01',
        'warrantyDate': '2022-01-01',
        'versionLock': 1,
    }
    info = PrestagePurchasingInformation.from_api(data)
    assert info.apple_care_id == 'abc'
    assert info.validate() is info
    assert info.to_api() == data

    info.life_expectancy = '7'
    assert info.life_expectancy == 7
    assert info.to_api(changed_only=True) == {'lifeExpectancy': 7}


def test_oapi_required():
    change = ExtensionAttributeMigrationMappingChange(source='a', target='b')
    with pytest.raises(MissingDataError) as excinfo:
        change.validate()
    assert excinfo.value.missing == ['multi_value']

    change.multi_value = 'no'
    assert change.multi_value is False
    change.validate()


def test_dates():
    g = ComputerGeneral.from_api({'report_date': '2019-02-04 21:09:31'})
    assert g.report_date == datetime(2019, 2, 4, 21, 9, 31)

    g = ComputerGeneral.from_api({'report_date': ''})
    assert g.report_date is None
