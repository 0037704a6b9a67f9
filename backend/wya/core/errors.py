class WyaError(Exception):
    """Base class for errors raised by the service layer."""


class UserNotFound(WyaError, LookupError):
    def __init__(self, identity_id: str):
        super().__init__(f"User {identity_id} not found")
        self.identity_id = identity_id


class UserAlreadyExists(WyaError):
    def __init__(self, identity_id: str):
        super().__init__(f"User {identity_id} already exists")
        self.identity_id = identity_id


class UpstreamFailure(WyaError):
    """An external collaborator (identity provider, push transport, store) failed."""


class OrphanedRecordError(UpstreamFailure):
    """The identity was deleted but the user record could not be removed."""

    def __init__(self, identity_id: str):
        super().__init__(
            f"Identity {identity_id} was deleted but its user record remains; manual cleanup required"
        )
        self.identity_id = identity_id
