"""
Exceptions raised by the flight search stores.
"""


class StoreError(Exception):
    """A store query or write failed."""
    pass


class PreferenceStoreError(StoreError):
    """Reading or writing a saved preference failed."""
    pass
