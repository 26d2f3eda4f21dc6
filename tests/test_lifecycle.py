import pytest

from talentmatch.core.constants import ErrorCodes
from talentmatch.domain.applications.entities import Application, ApplicationStatus
from talentmatch.domain.applications.lifecycle import (
    ALLOWED_TRANSITIONS,
    ApplicationLifecycle,
    parse_status,
)
from talentmatch.utils.error_handling import InvalidArgumentError, InvalidTransitionError

S = ApplicationStatus


def make_application(status=S.APPLIED, notes=""):
    return Application(job_id="j1", candidate_id="c1", status=status, notes=notes)


class TestTransitionTable:
    @pytest.mark.parametrize(
        "current, requested",
        [
            (S.APPLIED, S.REVIEWING),
            (S.APPLIED, S.REJECTED),
            (S.APPLIED, S.HIRED),
            (S.REVIEWING, S.REJECTED),
            (S.REVIEWING, S.HIRED),
        ],
    )
    def test_allowed(self, current, requested):
        application = make_application(current)
        updated = ApplicationLifecycle.transition(application, requested)
        assert updated.status == requested

    @pytest.mark.parametrize("terminal", [S.REJECTED, S.HIRED])
    @pytest.mark.parametrize("requested", [S.APPLIED, S.REVIEWING, S.REJECTED, S.HIRED])
    def test_terminal_states_reject_every_outgoing_transition(self, terminal, requested):
        if requested == terminal:
            pytest.skip("same-state transition is a no-op")
        application = make_application(terminal)

        with pytest.raises(InvalidTransitionError) as exc_info:
            ApplicationLifecycle.transition(application, requested)

        error = exc_info.value
        assert error.error_code == ErrorCodes.BUSINESS_INVALID_TRANSITION
        assert error.current_status == terminal.value
        assert error.requested_status == requested.value
        assert application.status == terminal

    def test_reviewing_cannot_go_back_to_applied(self):
        with pytest.raises(InvalidTransitionError):
            ApplicationLifecycle.transition(make_application(S.REVIEWING), S.APPLIED)

    def test_terminal_states_have_no_exits(self):
        assert ALLOWED_TRANSITIONS[S.REJECTED] == frozenset()
        assert ALLOWED_TRANSITIONS[S.HIRED] == frozenset()


class TestSameStateTransition:
    @pytest.mark.parametrize("status", list(S))
    def test_is_a_no_op_success(self, status):
        application = make_application(status)
        before = application.updated_at

        updated = ApplicationLifecycle.transition(application, status)

        assert updated.status == status
        assert updated.updated_at == before

    def test_records_notes(self):
        application = make_application(S.HIRED, notes="old")
        ApplicationLifecycle.transition(application, S.HIRED, notes="signed offer")
        assert application.notes == "signed offer"
        assert application.status == S.HIRED


class TestParsing:
    @pytest.mark.parametrize("value", ["hired", "Hired", " HIRED ", S.HIRED])
    def test_status_names_are_case_insensitive(self, value):
        assert parse_status(value) == S.HIRED

    def test_unknown_status(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            parse_status("interviewing")
        assert exc_info.value.argument_name == "status"

    def test_string_status_transition(self):
        application = make_application()
        ApplicationLifecycle.transition(application, "Reviewing", notes="phone screen")
        assert application.status == S.REVIEWING
        assert application.notes == "phone screen"

    def test_notes_length_is_limited(self):
        with pytest.raises(InvalidArgumentError):
            ApplicationLifecycle.transition(make_application(), S.REVIEWING, notes="x" * 2001)
