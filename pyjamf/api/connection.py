"""
The connection to a Jamf Pro server, as far as the object layer needs one.

Objects only ever ask it for reference data (existing objects, sites,
categories, extension attribute definitions) and hand it the documents to
save. HTTP, authentication and paging are up to the implementation.
"""

import copy
import logging
from typing import Any, Dict, List, Optional
from xml.etree import ElementTree

from pyjamf.errors import NotFoundError
from .definitions import DefinitionRegistry


logger = logging.getLogger(__name__)


def resource_name(rsrc) -> str:
    """`rsrc` is a resource name such as 'computers', or an object class
    declaring one as `RSRC_BASE`.
    """
    if isinstance(rsrc, str):
        return rsrc
    try:
        return rsrc.RSRC_BASE
    except AttributeError:
        raise TypeError(f'{rsrc!r} is not a resource') from None


class APIConnection:
    """This abstracts the server an object came from.

    Subclasses implement the five request methods; `definitions` caches the
    extension attribute definitions on top of them.
    """

    def __init__(self, *, cache_definitions=None):
        self.definitions = DefinitionRegistry(self, cache=cache_definitions)

    def get(self, rsrc, ident) -> Dict:
        """The decoded payload of one object."""
        raise NotImplementedError()

    def list_all(self, rsrc, *, refresh=False) -> List[Dict]:
        """The summaries (at least `id` and `name`) of all objects of a type."""
        raise NotImplementedError()

    def put(self, rsrc, ident, data):
        raise NotImplementedError()

    def post(self, rsrc, data) -> int:
        """Create an object, return its new id."""
        raise NotImplementedError()

    def extension_attribute_definitions(self, resource_type) -> List[Any]:
        """The extension attribute definitions of 'computer', 'mobile_device'
        or 'user', either as payloads or `ExtensionAttributeDefinition`s.
        """
        raise NotImplementedError()


class StaticConnection(APIConnection):
    """
    A static set of objects, kept in memory. Everything that is saved is
    also recorded in `submitted`, as `(method, resource, id, data)`.
    """

    def __init__(self, objects: Optional[Dict[str, Dict[int, Dict]]] = None,
                 ea_definitions: Optional[Dict[str, List[Any]]] = None,
                 summaries: Optional[Dict[str, List[Dict]]] = None, **kwargs):
        super().__init__(**kwargs)
        self.objects = {rsrc: dict(items) for rsrc, items in (objects or {}).items()}
        self.ea_definitions = dict(ea_definitions or {})
        # Lists of things which are never fetched one by one, like sites.
        self.summaries = {rsrc: list(items) for rsrc, items in (summaries or {}).items()}
        self.submitted = []

    def get(self, rsrc, ident):
        rsrc = resource_name(rsrc)
        try:
            return copy.deepcopy(self.objects[rsrc][ident])
        except KeyError:
            raise NotFoundError(f'No {rsrc} with id {ident}') from None

    def list_all(self, rsrc, *, refresh=False):
        rsrc = resource_name(rsrc)
        if rsrc in self.summaries:
            return list(self.summaries[rsrc])
        return [
            {'id': ident, 'name': find_name(payload)}
            for ident, payload in self.objects.get(rsrc, {}).items()
        ]

    def put(self, rsrc, ident, data):
        rsrc = resource_name(rsrc)
        if ident not in self.objects.get(rsrc, {}):
            raise NotFoundError(f'No {rsrc} with id {ident}')
        logger.debug(f'PUT {rsrc}/id/{ident}')
        self.submitted.append(('put', rsrc, ident, data))

    def post(self, rsrc, data):
        rsrc = resource_name(rsrc)
        items = self.objects.setdefault(rsrc, {})
        ident = max(items, default=0) + 1
        items[ident] = {'name': find_name(data)}
        logger.debug(f'POST {rsrc}/id/{ident}')
        self.submitted.append(('post', rsrc, ident, data))
        return ident

    def extension_attribute_definitions(self, resource_type):
        return list(self.ea_definitions.get(resource_type, []))


def find_name(data):
    """Find the name in an object payload, or in an XML document, where it
    is either a top level element or part of the 'general' subset.
    """
    if isinstance(data, (bytes, str)):
        root = ElementTree.fromstring(data)
        return root.findtext('name') or root.findtext('general/name')

    if isinstance(data, dict):
        if len(data) == 1:
            (inner,) = data.values()
            if isinstance(inner, dict):
                data = inner
        if data.get('name') is not None:
            return data['name']
        general = data.get('general')
        if isinstance(general, dict):
            return general.get('name')
    return None
