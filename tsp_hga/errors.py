class TspError(Exception):
    """Base class of every error raised by tsp_hga."""


class IllegalConfigurationError(TspError, ValueError):
    pass


class MalformedGenotypeError(TspError, ValueError):
    pass


class IncompatiblePointKindError(TspError, TypeError):
    pass


class InvalidInputError(TspError, ValueError):
    pass
