# digipath/errors.py


class DigipathError(Exception):
    """Base class for usage-contract violations raised by digipath."""


class InvalidStateError(DigipathError, RuntimeError):
    pass


class NotVisitedError(DigipathError, LookupError):
    def __init__(self, index: int):
        super().__init__(f"index {index} has not been settled by this search")
        self.index = index


class IndexOutOfRangeError(DigipathError, IndexError):
    pass
