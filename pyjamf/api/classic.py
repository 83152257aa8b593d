"""
Objects of the Classic API, which speaks XML.

A save only sends what changed: the properties recorded in the object's
`ChangeSet`, and for nested objects (like the 'general' subset of a
computer), the properties changed within them. New objects are sent in full.
"""

import enum
import logging
from datetime import datetime
from typing import Any, Optional
from xml.etree import ElementTree

from pyjamf import validate
from pyjamf.errors import JamfError
from pyjamf.models import (
    model, attrib, JamfObject, Immutable, schema_of, format_jamf_datetime)


logger = logging.getLogger(__name__)


def require_api(obj):
    if obj.api is None:
        raise JamfError(f'{obj.__class__.__name__} is not connected to a server')
    return obj.api


def xml_text(value) -> str:
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return format_jamf_datetime(value)
    return str(value)


def singular(tag):
    if tag.endswith('ies'):
        return tag[:-3] + 'y'
    if tag.endswith('s'):
        return tag[:-1]
    return tag


def append_xml(parent, tag, value):
    """Add `value` as a child element `tag` of `parent`.

    Models become elements with one child per property that is set, lists
    one child per item, named after the singular of `tag`.
    """
    element = ElementTree.SubElement(parent, tag)
    if isinstance(value, JamfObject):
        for prop in schema_of(value):
            item = getattr(value, prop.name)
            if item is not None:
                append_xml(element, prop.data_key, item)
    elif isinstance(value, list):
        item_tag = singular(tag)
        for item in value:
            append_xml(element, item_tag, item)
    elif isinstance(value, dict):
        for key, item in value.items():
            append_xml(element, key, item)
    else:
        element.text = xml_text(value)
    return element


def add_changed_properties(parent, obj):
    changed = obj.changed_fields()
    for prop in schema_of(obj):
        value = getattr(obj, prop.name)
        if prop.name in changed:
            append_xml(parent, prop.data_key, value)
        elif isinstance(value, JamfObject) and value.has_unsaved_changes():
            add_changed_properties(ElementTree.SubElement(parent, prop.data_key), value)
    return parent


@model(camelcase=False)
class IdName(Immutable, JamfObject):
    """A reference to another object, e.g. the site of a computer."""
    id: int = attrib(identifier=True)
    name: str = attrib()


@model(camelcase=False)
class ExtensionAttributeValue(Immutable, JamfObject):
    id: int = attrib(identifier=True)
    name: str = attrib(required=True)
    type: str = attrib()
    value: Any = attrib()


class ClassicObject(JamfObject):
    """Base class of the objects of the Classic API.

    Subclasses name their resource with `RSRC_BASE` (e.g. 'computers') and
    the key of the object in its payload with `RSRC_OBJECT_KEY` (e.g.
    'computer'). If id and name are not top level properties, but live in a
    nested object, `MAIN_SUBSET` is its name.
    """

    __slots__ = ()

    RSRC_BASE: str = None
    RSRC_OBJECT_KEY: str = None
    MAIN_SUBSET: Optional[str] = None

    @classmethod
    def fetch(cls, api, ident):
        payload = api.get(cls.RSRC_BASE, ident)
        logger.debug(f'Loading {cls.RSRC_OBJECT_KEY} {ident}')
        if cls.RSRC_OBJECT_KEY in payload:
            payload = payload[cls.RSRC_OBJECT_KEY]
        return cls.from_api(payload, api=api)

    def main_subset(self) -> JamfObject:
        if self.MAIN_SUBSET:
            return getattr(self, self.MAIN_SUBSET)
        return self

    @property
    def identifier(self):
        main = self.main_subset()
        if main is self:
            return super().identifier
        return main.identifier

    def nested_objects(self):
        for prop in schema_of(self):
            value = getattr(self, prop.name)
            if isinstance(value, JamfObject):
                yield value
            elif isinstance(value, list):
                yield from (item for item in value if isinstance(item, JamfObject))

    def has_unsaved_changes(self) -> bool:
        if super().has_unsaved_changes():
            return True
        return any(item.has_unsaved_changes() for item in self.nested_objects())

    def reset_changes(self):
        super().reset_changes()
        for item in self.nested_objects():
            item.reset_changes()

    def rest_xml(self, *, full=False):
        """The document to save this object.

        Unless `full`, only the changed properties are included.
        """
        root = ElementTree.Element(self.RSRC_OBJECT_KEY)
        if full:
            for prop in schema_of(self):
                value = getattr(self, prop.name)
                if value is not None:
                    append_xml(root, prop.data_key, value)
        else:
            add_changed_properties(root, self)
        return root

    def to_xml(self, *, full=None) -> bytes:
        if full is None:
            full = self.identifier is None
        return ElementTree.tostring(self.rest_xml(full=full), encoding='UTF-8')

    def save(self):
        """Create or update this object on the server.

        Objects without an id are created, after making sure their name is
        not taken yet. The changes are cleared afterwards.
        """
        api = require_api(self)
        self.validate()

        ident = self.identifier
        if ident is None:
            main = self.main_subset()
            name = getattr(main, 'name', None)
            if name is not None:
                validate.unique_identifier(type(self), 'name', name, api=api)
            new_id = api.post(self.RSRC_BASE, self.to_xml(full=True))
            # The id is read-only for everyone but the server.
            object.__setattr__(main, 'id', new_id)
            logger.debug(f'Created {self.RSRC_OBJECT_KEY} {new_id}')
        else:
            api.put(self.RSRC_BASE, ident, self.to_xml(full=False))
            logger.debug(f'Updated {self.RSRC_OBJECT_KEY} {ident}')

        self.reset_changes()
        return self
