"""This is the model system we use for the objects of the Jamf APIs.

Here is what we need from it
----------------------------

1) It should be fun to use from Python, and provide some amount of validation
   to help the programmer achieve correctness: assigning a bad MAC address
   to a computer should fail right there, not with an HTTP 409 later.

2) We need to take the data coming from the server, and convert it into
   those objects. We trust the server more than the programmer: data which
   is incomplete is accepted at this point, and only refused when trying to
   save it back.

3) The Jamf Pro API uses camelCase keys, the Classic API snake_case. We like
   snake_case internally.

4) Objects must know which of their properties were changed since they were
   loaded, so that we can send back only the changes. Some types of object
   cannot be changed at all.

For this, we use `attrs` combined with `marshmallow`.


How it works
------------

Declare a model by subclassing `JamfObject`, and decorating the class:

    @model
    class PurchasingInfo(JamfObject):
        id: str = attrib(identifier=True, readonly=True)
        po_number: str = attrib(required=True, data_key='poNumber')
        lease_date: datetime = attrib()

From the annotations, the decorator builds:

- The attrs class itself, with slots (so that undeclared properties cannot
  be set), and an `on_setattr` hook which runs the property's validator and
  records the change in the instance's `ChangeSet`.
- A `SchemaDefinition`, the static table of properties of this type
  (`schema_of(PurchasingInfo)`).
- A marshmallow schema, used by `from_api()` and `to_api()`.

Extend `Immutable` to build a type without any setters.
"""


from .wrap import (
    model, attrib, JamfObject, Immutable, ChangeSet, SchemaDefinition,
    PropertyDefinition, schema_of, is_mutable
)
from .fields import JamfDateTime, parse_jamf_datetime, format_jamf_datetime
