"""
Optional capabilities of objects, added by composing these classes into a
model:

    @model(camelcase=False)
    class Computer(Extendable, Sitable, ClassicObject):
        ...

They are plain classes without state of their own; everything they need is
a property of the model they are composed into.
"""

import logging
from typing import Any, Dict, List
from xml.etree import ElementTree

from pyjamf.errors import NotFoundError
from pyjamf.models import Immutable, format_jamf_datetime
from pyjamf.utils import ci_fetch_string
from pyjamf.validate import BLANK
from .classic import ExtensionAttributeValue, IdName, append_xml, require_api, xml_text
from .definitions import DataType, DeclaredType


__all__ = ['Extendable', 'Sitable', 'Categorizable', 'Immutable']


logger = logging.getLogger(__name__)


class Extendable:
    """Objects carrying extension attribute values, in a property
    `extension_attributes: List[ExtensionAttributeValue]`.

    The definitions of those are looked up by `EXTENSION_ATTRIBUTE_TYPE`,
    which is one of 'computer', 'mobile_device' or 'user'.
    """

    __slots__ = ()

    EXTENSION_ATTRIBUTE_TYPE: str = None

    def __attrs_post_init__(self):
        self.parse_ext_attrs()

    def parse_ext_attrs(self):
        """Convert the values as they came from the server to their declared
        type, as far as that is possible.
        """
        if self.extension_attributes is None:
            object.__setattr__(self, 'extension_attributes', [])

        for entry in self.extension_attributes:
            data_type = DataType.from_jamf(entry.type)
            if data_type is None:
                continue
            # Not a change; this is what the server has.
            object.__setattr__(entry, 'value', DeclaredType(data_type).parse(entry.value))

        self.changes.extension_attributes.clear()

    def find_ext_attr(self, name):
        names = [entry.name for entry in self.extension_attributes]
        found = ci_fetch_string(names, name)
        if found is None:
            return None
        return self.extension_attributes[names.index(found)]

    def set_ext_attr(self, name, value):
        """Set the value of the extension attribute `name`.

        The value is checked against the definition of the extension
        attribute on the server: the choices of a pop-up menu, and the data
        type. The empty string (`BLANK`) clears any extension attribute.
        """
        api = require_api(self)
        definition = api.definitions.fetch(self.EXTENSION_ATTRIBUTE_TYPE, name)
        value = definition.declared_type.coerce(value, name=definition.name)

        entry = self.find_ext_attr(definition.name)
        if entry is not None:
            object.__setattr__(entry, 'value', value)
        else:
            self.extension_attributes.append(ExtensionAttributeValue(
                id=definition.id,
                name=definition.name,
                type=definition.data_type.value,
                value=value,
            ))

        self.changes.record_extension_attribute(definition.name)
        logger.debug(f'Set extension attribute {definition.name!r} to {value!r}')
        return value

    @property
    def ext_attrs(self) -> Dict[str, Any]:
        return {entry.name: entry.value for entry in self.extension_attributes}

    def ext_attr(self, name):
        """The value of one extension attribute. The name is case-insensitive."""
        entry = self.find_ext_attr(name)
        if entry is None:
            raise NotFoundError(f"No extension attribute named '{name}'")
        return entry.value

    def unsaved_eas(self) -> bool:
        return self.changes.needs_update and bool(self.changes.extension_attributes)

    def unsaved_ext_attrs(self) -> List[ExtensionAttributeValue]:
        changed = self.changes.extension_attributes
        return [entry for entry in self.extension_attributes if entry.name in changed]

    def ext_attr_xml(self):
        """The changed extension attributes, for saving:

            <extension_attributes>
              <extension_attribute>
                <name>Owner</name>
                <value>Mary</value>
              </extension_attribute>
            </extension_attributes>
        """
        root = ElementTree.Element('extension_attributes')
        for entry in self.unsaved_ext_attrs():
            element = ElementTree.SubElement(root, 'extension_attribute')
            ElementTree.SubElement(element, 'name').text = entry.name
            ElementTree.SubElement(element, 'value').text = ext_attr_text(entry)
        return root

    def rest_xml(self, *, full=False):
        root = super().rest_xml(full=full)
        if not full and self.unsaved_eas() and root.find('extension_attributes') is None:
            root.append(self.ext_attr_xml())
        return root


def ext_attr_text(entry) -> str:
    if DataType.from_jamf(entry.type) == DataType.date:
        try:
            return format_jamf_datetime(entry.value)
        except (AttributeError, TypeError, ValueError):
            return xml_text(entry.value)
    return xml_text(entry.value)


# The id Jamf uses for "no site" and "no category".
NONE_ID = -1


def lookup_reference(api, resource, name, none_name):
    """Resolve `name` to an `IdName`, case-insensitively, among the objects
    of `resource` (e.g. 'sites').

    `none_name` (the way Jamf names "nothing assigned") and blank names
    resolve to the `NONE_ID` reference.
    """
    if name is None or name == BLANK or str(name).casefold() == none_name.casefold():
        return IdName(id=NONE_ID, name=none_name)

    existing = api.list_all(resource)
    found = ci_fetch_string([item['name'] for item in existing], name)
    if found is None:
        raise NotFoundError(f"No {resource} entry named '{name}'")
    match = next(item for item in existing if item['name'] == found)
    return IdName(id=match['id'], name=found)


def reference_holder(obj, subset):
    return getattr(obj, subset) if subset else obj


class Sitable:
    """Objects which can be assigned to a site, in property `site` of the
    nested object `SITE_SUBSET` (or of the object itself).
    """

    __slots__ = ()

    SITE_SUBSET = None
    NON_SITE = 'None'

    @property
    def site(self):
        return reference_holder(self, self.SITE_SUBSET).site

    @property
    def site_name(self):
        return self.site.name if self.site else None

    @property
    def site_id(self):
        return self.site.id if self.site else None

    def set_site(self, name):
        """Assign to the site `name`, or to none if `name` is 'None' or blank."""
        site = lookup_reference(require_api(self), 'sites', name, self.NON_SITE)
        reference_holder(self, self.SITE_SUBSET).site = site
        logger.debug(f'Set site to {site.name!r}')
        return site

    def add_site_to_xml(self, root):
        """Put the current site into `root`, an XML document of this object."""
        parent = root
        if self.SITE_SUBSET:
            parent = root.find(self.SITE_SUBSET)
            if parent is None:
                parent = ElementTree.SubElement(root, self.SITE_SUBSET)
        for old in parent.findall('site'):
            parent.remove(old)
        if self.site is not None:
            append_xml(parent, 'site', self.site)
        return root


class Categorizable:
    """Objects which can be assigned to a category, in property `category`
    of the nested object `CATEGORY_SUBSET` (or of the object itself).
    """

    __slots__ = ()

    CATEGORY_SUBSET = None
    NO_CATEGORY = 'No category assigned'

    @property
    def category(self):
        return reference_holder(self, self.CATEGORY_SUBSET).category

    @property
    def category_name(self):
        return self.category.name if self.category else None

    @property
    def category_id(self):
        return self.category.id if self.category else None

    def set_category(self, name):
        """Assign to the category `name`, or to none if `name` is blank."""
        category = lookup_reference(
            require_api(self), 'categories', name, self.NO_CATEGORY)
        reference_holder(self, self.CATEGORY_SUBSET).category = category
        logger.debug(f'Set category to {category.name!r}')
        return category
