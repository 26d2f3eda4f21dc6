"""
Application lifecycle state machine.
"""

from typing import Any, Dict, FrozenSet, Optional

from talentmatch.core.constants import BusinessRules
from talentmatch.utils.error_handling import InvalidArgumentError, InvalidTransitionError

from .entities import Application, ApplicationStatus, utc_now

ALLOWED_TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    ApplicationStatus.APPLIED: frozenset(
        {ApplicationStatus.REVIEWING, ApplicationStatus.REJECTED, ApplicationStatus.HIRED}
    ),
    ApplicationStatus.REVIEWING: frozenset(
        {ApplicationStatus.REJECTED, ApplicationStatus.HIRED}
    ),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.HIRED: frozenset(),
}


def parse_status(value: Any) -> ApplicationStatus:
    """Parse a status name, case-insensitively."""
    try:
        return ApplicationStatus(value)
    except ValueError as e:
        raise InvalidArgumentError(
            f"Unknown application status: {value}",
            argument_name="status",
            argument_value=value,
        ) from e


def validate_notes(notes: Optional[str]) -> None:
    if notes is not None and len(notes) > BusinessRules.MAX_NOTES_LENGTH:
        raise InvalidArgumentError(
            f"notes cannot exceed {BusinessRules.MAX_NOTES_LENGTH} characters",
            argument_name="notes",
        )


class ApplicationLifecycle:
    """Applies status changes according to ``ALLOWED_TRANSITIONS``."""

    @staticmethod
    def can_transition(current: ApplicationStatus, requested: ApplicationStatus) -> bool:
        return current == requested or requested in ALLOWED_TRANSITIONS[current]

    @classmethod
    def transition(
        cls,
        application: Application,
        requested_status: Any,
        notes: Optional[str] = None,
    ) -> Application:
        """
        Move ``application`` to ``requested_status`` in place.

        Moving into the current state is a successful no-op apart from
        recording ``notes``.

        Raises:
            InvalidTransitionError: If the table does not allow the move
        """
        requested = parse_status(requested_status)
        validate_notes(notes)
        current = application.status

        if not cls.can_transition(current, requested):
            raise InvalidTransitionError(
                current_status=current.value,
                requested_status=requested.value,
                application_id=application.id,
            )

        if requested != current:
            application.status = requested
            application.updated_at = utc_now()
        application.record_notes(notes)
        return application
