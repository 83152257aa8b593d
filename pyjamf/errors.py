class JamfError(Exception):
    pass


class InvalidDataError(JamfError, ValueError):
    """
    A value given to a validator or a typed setter was malformed, or out of
    the allowed range.
    """


class AlreadyExistsError(JamfError):
    """
    A value that must be unique across all objects of a type is already in use.
    """


class NotFoundError(JamfError, LookupError):
    """
    A referenced item (an extension attribute definition, a site, a category)
    does not exist.
    """


class UnsupportedError(JamfError):
    """
    A value is not among the choices allowed for it, e.g. a pop-up menu.
    """


class MissingDataError(JamfError):
    """
    An object is about to be saved, but required properties are not set.
    """

    def __init__(self, description=None, missing=()):
        super().__init__(description)
        self.missing = list(missing)
