"""
We wrap attrs. It is just flexible enough to support what we need: a static
table of the properties of each object type, and instances which remember
which of those properties have been changed since they were loaded.
"""

import logging
from typing import Any, Dict, List, Optional

import attr

from pyjamf.errors import MissingDataError
from pyjamf.validate import BLANK
from .marshal import marshallable, to_camel_case


logger = logging.getLogger(__name__)


@attr.s(slots=True)
class ChangeSet:
    """What happened to an object since it was loaded (or last saved).

    `fields` and `extension_attributes` hold names, in the order in which
    they were first changed.
    """

    fields: List[str] = attr.ib(factory=list)
    extension_attributes: List[str] = attr.ib(factory=list)
    needs_update: bool = attr.ib(default=False)

    def record_field(self, name):
        if name not in self.fields:
            self.fields.append(name)
        self.needs_update = True

    def record_extension_attribute(self, name):
        if name not in self.extension_attributes:
            self.extension_attributes.append(name)
        self.needs_update = True

    def clear(self):
        self.fields.clear()
        self.extension_attributes.clear()
        self.needs_update = False

    def __bool__(self):
        return self.needs_update and bool(self.fields or self.extension_attributes)


@attr.s(frozen=True, slots=True, auto_attribs=True)
class PropertyDefinition:
    name: str
    type: Any
    data_key: str
    required: bool = False
    identifier: bool = False
    readonly: bool = False
    validate: Any = attr.ib(default=None, eq=False, repr=False)


@attr.s(frozen=True, slots=True, auto_attribs=True)
class SchemaDefinition:
    """The static description of one object type, shared by all its instances."""

    name: str
    properties: Dict[str, PropertyDefinition]
    mutable: bool = True

    @property
    def identifier(self) -> Optional[str]:
        """Name of the property which is the primary identifier, if any."""
        for prop in self.properties.values():
            if prop.identifier:
                return prop.name
        return None

    @property
    def required(self) -> List[PropertyDefinition]:
        return [p for p in self.properties.values() if p.required]

    def __contains__(self, name):
        return name in self.properties

    def __getitem__(self, name) -> PropertyDefinition:
        return self.properties[name]

    def __iter__(self):
        return iter(self.properties.values())


def attrib(*, required=False, identifier=False, readonly=False, validate=None,
           data_key=None, metadata=None, **kwargs):
    """Declare a property of a Jamf object.

    Unless a default or factory is given, the property defaults to None:
    we are permissive when parsing data coming from the server, and only
    complain about missing `required` properties when saving.

    `validate` is one of the functions of `pyjamf.validate`, or anything
    else taking a value and returning the normalized value. It runs when
    the property is assigned, and again in `JamfObject.validate()`.
    """
    metadata = dict(metadata or {})
    metadata.update({
        'required': required,
        'identifier': identifier,
        'readonly': readonly,
        'validate': validate,
    })
    if data_key:
        metadata['data_key'] = data_key

    if 'default' not in kwargs and 'factory' not in kwargs:
        kwargs['default'] = None

    return attr.ib(metadata=metadata, **kwargs)


def track_changes(instance, attribute, value):
    """The `on_setattr` hook of all mutable models."""
    if attribute.metadata.get('internal'):
        return value

    if attribute.metadata.get('readonly'):
        raise AttributeError(f'{instance.__class__.__name__}.{attribute.name} is read-only')

    validate = attribute.metadata.get('validate')
    if validate is not None and value is not None and value != BLANK:
        value = validate(value)

    instance._changes.record_field(attribute.name)
    return value


class Immutable:
    """Mark a whole object type as read-only.

    Models extending this are built without any setters: assigning to any
    of their properties raises `attr.exceptions.FrozenInstanceError`, however
    the instance was created. Subclasses stay immutable.
    """

    __slots__ = ()

    @classmethod
    def mutable(cls):
        return False


@attr.s(slots=True, kw_only=True)
class JamfObject:
    """Base class of all models.

    Subclass this and decorate with `@model`.
    """

    _changes: ChangeSet = attr.ib(
        factory=ChangeSet, init=False, repr=False, eq=False, metadata={'internal': True})
    _api: Any = attr.ib(default=None, repr=False, eq=False, metadata={'internal': True})

    @classmethod
    def mutable(cls):
        return True

    @property
    def api(self):
        """The connection this object came from, or will be saved to."""
        return self._api

    @property
    def changes(self) -> ChangeSet:
        return self._changes

    @property
    def identifier(self):
        name = schema_of(self).identifier
        return getattr(self, name) if name else None

    def changed_fields(self) -> List[str]:
        return list(self._changes.fields)

    def has_unsaved_changes(self) -> bool:
        return bool(self._changes)

    def reset_changes(self):
        self._changes.clear()

    def property_values(self) -> Dict[str, Any]:
        return {prop.name: getattr(self, prop.name) for prop in schema_of(self)}

    def missing_required(self) -> List[str]:
        return [prop.name for prop in schema_of(self).required
                if getattr(self, prop.name) in (None, BLANK)]

    def validate(self):
        """Check this object is complete and valid, before saving it.

        Raises `MissingDataError` for required properties which are not set,
        and whatever the property validators raise.
        """
        missing = self.missing_required()
        if missing:
            raise MissingDataError(
                f'{self.__class__.__name__} is missing required properties: {", ".join(missing)}',
                missing=missing)

        for prop in schema_of(self):
            value = getattr(self, prop.name)
            if value is None:
                continue
            if prop.validate is not None and value != BLANK:
                prop.validate(value)
            for item in (value if isinstance(value, list) else [value]):
                if isinstance(item, JamfObject):
                    item.validate()
        return self


def schema_of(cls_or_instance) -> SchemaDefinition:
    cls = cls_or_instance if isinstance(cls_or_instance, type) else type(cls_or_instance)
    try:
        return cls.__jamf_schema__
    except AttributeError:
        raise TypeError(f'{cls.__name__} is not a model') from None


def is_mutable(cls_or_instance) -> bool:
    return schema_of(cls_or_instance).mutable


def make_schema_definition(attr_class, *, mutable, camelcase):
    properties = {}
    for field in attr.fields(attr_class):
        if field.metadata.get('internal'):
            continue

        default_key = to_camel_case(field.name) if camelcase else field.name
        properties[field.name] = PropertyDefinition(
            name=field.name,
            type=field.type,
            data_key=field.metadata.get('data_key', default_key),
            required=field.metadata.get('required', False),
            identifier=field.metadata.get('identifier', False),
            readonly=field.metadata.get('readonly', False),
            validate=field.metadata.get('validate'),
        )

    return SchemaDefinition(name=attr_class.__name__, properties=properties, mutable=mutable)


def model(maybe_cls=None, *, camelcase=True):
    """Turn a `JamfObject` subclass into a model.

    `camelcase` selects the keys used on the wire: the Jamf Pro API uses
    camelCase, the Classic API snake_case, like our property names.
    """
    def wrap(cls):
        mutable = cls.mutable()

        attr_class = attr.s(
            # Using slots gives us attribute-validation on set, because no
            # new attributes are allowed.
            slots=True,
            auto_attribs=True,
            kw_only=True,
            # An immutable type simply does not get any setters.
            frozen=not mutable,
            on_setattr=track_changes if mutable else None,
        )(cls)

        attr_class.__jamf_schema__ = make_schema_definition(
            attr_class, mutable=mutable, camelcase=camelcase)

        # Add the marshal helpers.
        attr_class = marshallable(attr_class)

        logger.debug(f'Registered model {attr_class.__name__} (mutable={mutable})')
        return attr_class

    if maybe_cls is None:
        return wrap
    else:
        return wrap(maybe_cls)
