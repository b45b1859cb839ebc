from typing import Optional


class CodesizeError(Exception):
    """Base exception for all Codesize related errors."""
    pass

class ConfigError(CodesizeError):
    """Raised when the configuration file or an override is malformed."""
    pass

class ArtifactReadError(CodesizeError):
    """Raised when a build-info or artifact file cannot be read or parsed."""
    pass

class ArtifactLookupFailure(CodesizeError):
    """Raised when a build-info file has no compiled entry for a contract."""

    def __init__(self, contract: str, build_info: str):
        super().__init__(f"Build info was not found in {build_info} for {contract}")
        self.contract = contract
        self.build_info = build_info

class DecodeInconsistency(CodesizeError):
    """
    Raised when bytecode and its source map do not add up: the decode ran past
    the tail, or a metadata trailer declares more bytes than are left.
    """

    def __init__(self, message: str, contract: Optional[str] = None, variant: Optional[str] = None):
        prefix = ""
        if contract:
            prefix = f"{contract} ({variant}): " if variant else f"{contract}: "
        super().__init__(prefix + message)
        self.reason = message
        self.contract = contract
        self.variant = variant

class SnapshotReadFailure(CodesizeError):
    """Raised when an existing history snapshot is unreadable or corrupt."""
    pass
