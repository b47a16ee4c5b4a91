"""Domain errors surfaced to screens as inline messages."""


class FamilySyncError(Exception):
    """Base class for errors a screen can show to the user."""


class AuthError(FamilySyncError):
    """Bad credentials, or a missing or expired session."""


class RequestCancelled(AuthError):
    """The session backing an in-flight request ended before it finished."""


class ProfileLookupError(FamilySyncError):
    """The signed-in user's profile could not be loaded."""


class UnknownRoleError(ProfileLookupError):
    """The profile carries a role outside the supported set."""

    def __init__(self, role: object) -> None:
        self.role = role
        super().__init__(f"Unrecognized role: {role!r}.")


class DataFetchError(FamilySyncError):
    """A read or write against the data store failed."""


class FamilyLookupError(DataFetchError):
    """The user's family could not be resolved."""


class ChoreTransitionError(FamilySyncError):
    """A chore status change that is not allowed."""


class GenerationError(FamilySyncError):
    """A text-generation request failed or returned an unusable payload."""


class InvitationError(FamilySyncError):
    """Inviting a family member failed."""


class FamilyMembershipError(DataFetchError):
    """A referenced member does not belong to the caller's family."""
