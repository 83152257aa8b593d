"""
The object types we model.

Classic API objects use the snake_case keys of their XML (and JSON) form,
Jamf Pro API objects use camelCase.
"""

import plistlib
from datetime import datetime
from typing import List, Optional

from pyjamf import validate
from pyjamf.models import model, attrib, JamfObject
from .classic import ClassicObject, IdName, ExtensionAttributeValue
from .mixins import Extendable, Sitable, Categorizable


@model(camelcase=False)
class ComputerGeneral(JamfObject):
    id: int = attrib(identifier=True, readonly=True)
    name: str = attrib(required=True, validate=validate.non_empty_string)
    serial_number: str = attrib()
    udid: str = attrib()
    mac_address: str = attrib(validate=validate.mac_address)
    alt_mac_address: str = attrib(validate=validate.mac_address)
    ip_address: str = attrib(validate=validate.ip_address)
    asset_tag: str = attrib()
    report_date: datetime = attrib(readonly=True)
    site: IdName = attrib()


@model(camelcase=False)
class Computer(Extendable, Sitable, ClassicObject):
    RSRC_BASE = 'computers'
    RSRC_OBJECT_KEY = 'computer'
    MAIN_SUBSET = 'general'
    SITE_SUBSET = 'general'
    EXTENSION_ATTRIBUTE_TYPE = 'computer'

    general: ComputerGeneral = attrib(factory=ComputerGeneral)
    extension_attributes: List[ExtensionAttributeValue] = attrib(factory=list)

    @property
    def name(self):
        return self.general.name

    @property
    def mac_addresses(self) -> List[str]:
        """The MAC addresses of this computer. Computers do not tell us
        which network interface each of them belongs to.
        """
        return [mac for mac in (self.general.mac_address, self.general.alt_mac_address) if mac]


# How a profile is redeployed when it is changed.
REDEPLOY_CHOICES = ('Newly Assigned', 'All')


@model(camelcase=False)
class ProfileGeneral(JamfObject):
    id: int = attrib(identifier=True, readonly=True)
    name: str = attrib(required=True, validate=validate.non_empty_string)
    description: str = attrib(validate=validate.stripped_string)
    uuid: str = attrib(readonly=True)
    redeploy_on_update: str = attrib(validate=validate.one_of(REDEPLOY_CHOICES))
    payloads: str = attrib(readonly=True)
    site: IdName = attrib()
    category: IdName = attrib()


@model(camelcase=False)
class ConfigurationProfile(Sitable, Categorizable, ClassicObject):
    """A macOS configuration profile."""

    RSRC_BASE = 'osxconfigurationprofiles'
    RSRC_OBJECT_KEY = 'os_x_configuration_profile'
    MAIN_SUBSET = 'general'
    SITE_SUBSET = 'general'
    CATEGORY_SUBSET = 'general'

    general: ProfileGeneral = attrib(factory=ProfileGeneral)

    @property
    def name(self):
        return self.general.name

    def parsed_payloads(self) -> Optional[dict]:
        """The payloads plist, parsed."""
        if not self.general.payloads:
            return None
        # Jamf sometimes exports an empty key, which is not valid plist.
        data = self.general.payloads.replace('<key/>', '')
        return plistlib.loads(data.encode('utf-8'))

    def payload_content(self) -> List[dict]:
        """The individual payloads of the profile."""
        parsed = self.parsed_payloads()
        return list(parsed.get('PayloadContent', [])) if parsed else []

    def payload_types(self) -> List[str]:
        """e.g. 'com.apple.caldav.account' for each payload."""
        return [payload.get('PayloadType') for payload in self.payload_content()]


@model(camelcase=False)
class SoftwareUpdateServer(ClassicObject):
    RSRC_BASE = 'softwareupdateservers'
    RSRC_OBJECT_KEY = 'software_update_server'

    id: int = attrib(identifier=True, readonly=True)
    name: str = attrib(required=True, validate=validate.non_empty_string)
    ip_address: str = attrib(required=True, validate=validate.ip_address)
    port: int = attrib(validate=validate.integer)
    set_system_wide: bool = attrib(validate=validate.boolean)


@model
class PrestagePurchasingInformation(JamfObject):
    """The purchasing details a prestage enrollment assigns to its devices."""

    id: int = attrib(identifier=True, required=True)
    is_leased: bool = attrib(required=True, validate=validate.boolean)
    is_purchased: bool = attrib(required=True, validate=validate.boolean)
    apple_care_id: str = attrib(required=True, data_key='appleCareID')
    po_number: str = attrib(required=True)
    vendor: str = attrib(required=True)
    purchase_price: str = attrib(required=True)
    life_expectancy: int = attrib(required=True, validate=validate.integer)
    purchasing_account: str = attrib(required=True)
    purchasing_contact: str = attrib(required=True)
    lease_date: str = attrib(required=True)
    po_date: str = attrib(required=True)
    warranty_date: str = attrib(required=True)
    version_lock: int = attrib(required=True, validate=validate.integer)


@model
class ExtensionAttributeMigrationMappingChange(JamfObject):
    source: str = attrib(required=True)
    target: str = attrib(required=True)
    multi_value: bool = attrib(required=True, validate=validate.boolean)
