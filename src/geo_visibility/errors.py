"""Exception types raised inside the citation engine."""


class GeoVisibilityError(Exception):
    """Base class for engine errors."""


class MalformedResponseError(GeoVisibilityError):
    """A provider answered 2xx with a body we cannot interpret."""
