class StatemapError(Exception):
    """Base error for loading and rendering the state map."""


class DataLoadError(StatemapError):
    pass


class GeoLoadError(StatemapError):
    pass
