"""did:key identifiers, UCAN commands, arguments, metadata, CIDs, CAR files and token containers."""

__version__ = "0.1.0"