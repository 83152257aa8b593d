import pytest

from pyjamf import config
from pyjamf.api import StaticConnection


COMPUTER_EA_DEFINITIONS = [
    {
        'id': 1,
        'name': 'Department',
        'description': 'Where the computer is used',
        'data_type': 'String',
        'input_type': {'type': 'Pop-up Menu', 'popup_choices': ['Sales', 'Engineering']},
    },
    {
        'id': 2,
        'name': 'Asset Count',
        'data_type': 'Integer',
        'input_type': {'type': 'Text Field'},
    },
    {
        'id': 3,
        'name': 'Warranty Expires',
        'data_type': 'Date',
        'input_type': {'type': 'Text Field'},
    },
    {
        'id': 4,
        'name': 'Owner',
        'data_type': 'String',
        'input_type': {'type': 'Text Field'},
    },
]


def computer_payload():
    return {
        'computer': {
            'general': {
                'id': 1,
                'name': 'Lab-Mac-01',
                'serial_number': 'C02XK0AAJG5J',
                'udid': '55900BDC-347C-58B1-D249-F32244B11D30',
                'mac_address': '00:3E:E1:C5:2A:10',
                'alt_mac_address': '',
                'ip_address': '10.0.1.15',
                'report_date': '2019-02-04 21:09:31',
                'site': {'id': -1, 'name': 'None'},
                'remote_management': {'managed': True},
            },
            'extension_attributes': [
                {'id': 1, 'name': 'Department', 'type': 'String', 'value': 'Sales'},
                {'id': 2, 'name': 'Asset Count', 'type': 'Number', 'value': '12'},
                {'id': 3, 'name': 'Warranty Expires', 'type': 'Date',
                 'value': '2021-06-30 00:00:00'},
                {'id': 4, 'name': 'Owner', 'type': 'String', 'value': ''},
            ],
        }
    }


PROFILE_PAYLOADS = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
  <key>PayloadContent</key>
  <array>
    <dict>
      <key>PayloadType</key>
      <string>com.apple.caldav.account</string>
    </dict>
    <dict>
      <key>PayloadType</key>
      <string>com.apple.wifi.managed</string>
    </dict>
  </array>
  <key/>
  <key>PayloadUUID</key>
  <string>5E4F4A6C-DF34-4D3B-8E1A-2E0CDA1E5B01</string>
</dict>
</plist>
"""


def profile_payload():
    return {
        'os_x_configuration_profile': {
            'general': {
                'id': 7,
                'name': 'Calendar',
                'description': 'Company calendar',
                'uuid': '5E4F4A6C-DF34-4D3B-8E1A-2E0CDA1E5B01',
                'redeploy_on_update': 'Newly Assigned',
                'payloads': PROFILE_PAYLOADS,
                'site': {'id': -1, 'name': 'None'},
                'category': {'id': -1, 'name': 'No category assigned'},
            }
        }
    }


@pytest.fixture(autouse=True)
def settings():
    """Every test starts with the default settings, whatever the environment."""
    previous = config._settings
    yield config.configure(config.Settings())
    config._settings = previous


@pytest.fixture
def api():
    return StaticConnection(
        objects={
            'computers': {1: computer_payload(), 2: {'computer': {'general': {'id': 2, 'name': 'Lab-Mac-02'}}}},
            'osxconfigurationprofiles': {7: profile_payload()},
            'softwareupdateservers': {
                3: {'software_update_server': {
                    'id': 3, 'name': 'SUS', 'ip_address': '10.0.0.2', 'port': 8088,
                    'set_system_wide': True}},
            },
        },
        ea_definitions={'computer': COMPUTER_EA_DEFINITIONS},
        summaries={
            'sites': [{'id': 1, 'name': 'Headquarters'}, {'id': 2, 'name': 'Branch Office'}],
            'categories': [{'id': 4, 'name': 'Productivity'}],
        },
    )
