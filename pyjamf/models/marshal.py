"""
This implements the marshaling system for our `attr` models, based on
`marshmallow`.

`@model` calls `marshallable` on each model class, which adds
`cls.from_api` and `instance.to_api` - based on the Python 3 type
annotations.

1. The marshmallow deserialization helpers (`from_api`) will:

    - Validate the types of all properties, including nested structures.
    - Read each property from its key on the wire (camelCase for the Jamf Pro
      API, snake_case for the Classic API).
    - Skip keys the model does not know about; the server adds fields over
      time, and that should not break us.
    - Not require anything: missing properties end up as their defaults.
      Required properties are only enforced when saving.

2. The marshmallow serialization helpers (`to_api`) will:

    - Output the wire keys again.
    - Optionally, output only those properties which have been changed
      since the object was loaded.
"""

import enum
import types
from datetime import datetime
from inspect import isclass
from typing import Union, Dict, ForwardRef, Tuple, Any, get_args, get_origin

import marshmallow
from marshmallow import ValidationError, post_load, fields, EXCLUDE

from pyjamf.errors import InvalidDataError
from .fields import JamfDateTime


NoneType = type(None)

UNION_TYPES = (Union, getattr(types, 'UnionType', Union))


TYPE_MAPPING = {
    str: fields.String,
    float: fields.Float,
    bool: fields.Boolean,
    int: fields.Integer,
    datetime: JamfDateTime,
}


def get_marshmallow_field_class_from_python_type(klass):
    # It is already a marshmallow type?
    if isinstance(klass, fields.Field):
        return klass, {}

    # Is this another marshallable data class?
    if hasattr(klass, '__marshmallow_schema__'):
        mm_type = CustomNested
        args = {'nested': klass}

    # Is it an enum
    elif isinstance(klass, type) and issubclass(klass, enum.Enum):
        mm_type = fields.Enum
        args = {'enum': klass, 'by_value': True}

    # Otherwise, see if this type as a direct mapping to a marshmallow field
    else:
        if klass not in TYPE_MAPPING:
            raise ValueError('%s is not a valid type' % klass)
        mm_type = TYPE_MAPPING[klass]
        args = {}

    return mm_type, args


def get_marshmallow_field_class_from_mypy_annotation(mypy_type) -> Tuple[Any, Dict]:
    # A forward reference can only point to the model being defined.
    if isinstance(mypy_type, ForwardRef):
        return CustomNested, {'nested': mypy_type.__forward_arg__}

    # Any types we read as "Raw"
    if mypy_type is Any:
        return fields.Raw, {}

    # Resolve MyPy types. Those hide their real type because they do not
    # want `isinstance(foo, Union)` to be abused.
    real_mypy_type = get_origin(mypy_type)
    if real_mypy_type is not None:
        if real_mypy_type in UNION_TYPES:
            # We do not want to support Unions itself; we only allow Optional[foo],
            # which in MyPy internally is Union[foo, None].
            union_types = [t for t in get_args(mypy_type) if t is not NoneType]
            if len(union_types) > 1:
                raise ValueError(f'{mypy_type} is not supported, only Optional[...]')

            field_type, field_args = \
                get_marshmallow_field_class_from_mypy_annotation(union_types[0])
            return field_type, {**field_args, 'allow_none': True}

        elif isclass(real_mypy_type) and issubclass(real_mypy_type, list):
            item_type = get_args(mypy_type)[0]
            item_field_class, item_field_args = \
                get_marshmallow_field_class_from_mypy_annotation(item_type)

            if issubclass(item_field_class, fields.Nested):
                return item_field_class, {'many': True, **item_field_args}
            else:
                field_instance = item_field_class(**item_field_args)
                return fields.List, {'cls_or_instance': field_instance}

        elif isclass(real_mypy_type) and issubclass(real_mypy_type, dict):
            key_type, value_type = get_args(mypy_type)
            return fields.Dict, {
                'keys': make_marshmallow_field_from_python_type(key_type),
                'values': make_marshmallow_field_from_mypy_annotation(value_type),
            }

    # Is this another marshallable data class?
    return get_marshmallow_field_class_from_python_type(mypy_type)


def make_marshmallow_field_from_python_type(klass):
    mm_type, args = get_marshmallow_field_class_from_python_type(klass)
    return mm_type(**args)


def make_marshmallow_field_from_mypy_annotation(mypy_type):
    mm_type, args = get_marshmallow_field_class_from_mypy_annotation(mypy_type)
    return mm_type(**args)


def make_marshmallow_field(prop) -> fields.Field:
    """For the given property of a `SchemaDefinition`, create a `marshmallow` field.

    Nothing is required, and everything may be null: we take what the server
    gives us.
    """
    field_type, field_args = get_marshmallow_field_class_from_mypy_annotation(prop.type)
    field_args = {**field_args, 'allow_none': True}

    return field_type(
        data_key=prop.data_key,
        required=False,
        **field_args
    )


def unmarshal_func(cls, data: Dict, *, api=None):
    schema = cls.__marshmallow_schema__()
    schema.api = api
    try:
        return schema.load(data)
    except ValidationError as exc:
        raise InvalidDataError(f'Invalid data for {cls.__name__}: {exc.messages}') from exc


def marshal_func(self, *, changed_only=False):
    """Serialize to the structure the API expects.

    With `changed_only`, only the properties changed since loading are output.
    """
    if changed_only:
        names = self.changes.fields
        if not names:
            return {}
        schema = self.__marshmallow_schema__(only=names)
    else:
        schema = self.__marshmallow_schema__()
    return schema.dump(self)


def marshallable(attrclass):
    """Adds `from_api` and `to_api` methods to the model class, to create the
    class from incoming unstructured data with validation, and back.

    To this end, internally constructs a marshmallow schema based on the
    class's `SchemaDefinition`.
    """

    marshmallow_fields = {
        prop.name: make_marshmallow_field(prop)
        for prop in attrclass.__jamf_schema__
    }

    def make_object(self, data, **kwargs):
        # The part where we convert the validated input data into an actual
        # `attr` instance is here, implemented via marshmallow @post_load.
        # That is, marshmallow itself will give us the instance directly,
        # and a marshmallow.fields.Nested() is all we need for relationships.
        return attrclass(api=getattr(self, 'api', None), **data)

    marshmallow_fields['_internal_make_object'] = post_load(make_object)
    marshmallow_fields['Meta'] = type('Meta', (), {'unknown': EXCLUDE})

    attrclass.__marshmallow_schema__ = type(
        f'{attrclass.__name__}Schema', (marshmallow.Schema,), marshmallow_fields)

    attrclass.from_api = classmethod(unmarshal_func)
    attrclass.to_api = marshal_func

    return attrclass


def to_camel_case(snake_str):
    components = snake_str.split('_')
    # We capitalize the first letter of each component except the first one
    # with the 'title' method and join them together.
    return components[0] + ''.join(x.title() for x in components[1:])


class CustomNested(fields.Nested):
    """
    Like marshmallow's Nested, but two differences:

     - When serializing, when given a dict (rather than a model), just outputs the
       dict as given.

       We use this to allow developers to skip the model system and instead directly
       include the desired Jamf structures.

    - Second, it takes the model class, and picks the model's schema.
    """

    def __init__(self, nested, **kwargs):
        fields.Nested.__init__(self, None, **kwargs)
        self.nested_class = nested

    @property
    def nested(self):
        # We need to support string references ourselves here, since marshmallow itself
        # only deals in marshmallow schemas.
        if isinstance(self.nested_class, str):
            if self.nested_class == 'self':
                return self.parent.__class__
            else:
                raise ValueError('not yet supported')

        return self.nested_class.__marshmallow_schema__

    @nested.setter
    def nested(self, value):
        # Parent tries to do that
        pass

    def _serialize(self, nested_obj, attr, obj, **kwargs):
        dump_dict = False
        if self.many and nested_obj and isinstance(nested_obj[0], dict):
            dump_dict = True
        elif not self.many and isinstance(nested_obj, dict):
            dump_dict = True
        if dump_dict:
            return nested_obj

        # Serialize as normal
        return super()._serialize(nested_obj, attr, obj, **kwargs)
