import pytest

from apps.common.exceptions import InvalidTransitionError
from apps.listings.models import ListingStatus
from apps.listings.state_machine import ListingStateMachine, TRANSITIONS, TERMINAL_STATES


VALID_EDGES = {
    (ListingStatus.AVAILABLE, ListingStatus.PENDING_SWAP),
    (ListingStatus.PENDING_SWAP, ListingStatus.SWAPPED),
    (ListingStatus.PENDING_SWAP, ListingStatus.AVAILABLE),
    (ListingStatus.AVAILABLE, ListingStatus.REDEEMED),
    (ListingStatus.AVAILABLE, ListingStatus.REJECTED),
    (ListingStatus.REJECTED, ListingStatus.AVAILABLE),
}

ALL_PAIRS = [(current, target) for current in ListingStatus for target in ListingStatus]


class TestListingStateMachine:

    def test_transition_table_matches_lifecycle(self):
        table_edges = {
            (current, target)
            for current, targets in TRANSITIONS.items()
            for target in targets
        }
        assert table_edges == VALID_EDGES

    @pytest.mark.parametrize('current,target', ALL_PAIRS)
    def test_only_listed_edges_are_allowed(self, current, target):
        expected = (current, target) in VALID_EDGES

        assert ListingStateMachine.can_transition(current, target) is expected
        if expected:
            ListingStateMachine.validate_transition(current, target)
        else:
            with pytest.raises(InvalidTransitionError):
                ListingStateMachine.validate_transition(current, target)

    def test_accepts_plain_strings(self):
        assert ListingStateMachine.can_transition('available', 'redeemed')

    def test_terminal_states(self):
        assert TERMINAL_STATES == {ListingStatus.SWAPPED, ListingStatus.REDEEMED}
        assert ListingStateMachine.is_terminal('swapped')
        assert ListingStateMachine.is_terminal('redeemed')
        assert not ListingStateMachine.is_terminal('rejected')

    def test_valid_transitions_from_available(self):
        assert ListingStateMachine.valid_transitions('available') == {
            ListingStatus.PENDING_SWAP,
            ListingStatus.REDEEMED,
            ListingStatus.REJECTED,
        }

    def test_error_message_lists_allowed_targets(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            ListingStateMachine.validate_transition('rejected', 'redeemed')

        assert 'rejected → redeemed' in str(exc_info.value)
        assert '[available]' in str(exc_info.value)
