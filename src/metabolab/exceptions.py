"""MetaboLab exceptions."""


class MetaboLabError(Exception):
    """Base exception for MetaboLab."""


class MoleculeNotFoundError(MetaboLabError, KeyError):
    """Raised when a molecule lookup fails."""


class EnzymeNotFoundError(MetaboLabError, KeyError):
    """Raised when an enzyme lookup fails."""


class GeneNotFoundError(MetaboLabError, KeyError):
    """Raised when a gene lookup fails."""


class ReactionNotFoundError(MetaboLabError, KeyError):
    """Raised when a reaction lookup fails."""


class NetworkLoadError(MetaboLabError):
    """Raised when a network file cannot be read or validated."""
