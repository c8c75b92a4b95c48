"""Listing state machine - enforces valid lifecycle transitions.

Listing lifecycle:
    AVAILABLE → PENDING_SWAP → SWAPPED
    PENDING_SWAP → AVAILABLE        (swap declined or cancelled)
    AVAILABLE → REDEEMED            (points redemption)
    AVAILABLE ⇄ REJECTED            (moderation)

SWAPPED and REDEEMED are terminal.

Pure computation: this module validates transitions only. Persisting a
transition (conditional write, version bump) is the exchange ledger's job.
"""

from apps.common.exceptions import InvalidTransitionError

from .models import ListingStatus


# Valid transitions: {from_state: {allowed_to_states}}
TRANSITIONS = {
    ListingStatus.AVAILABLE: {
        ListingStatus.PENDING_SWAP,
        ListingStatus.REDEEMED,
        ListingStatus.REJECTED,
    },
    ListingStatus.PENDING_SWAP: {
        ListingStatus.SWAPPED,
        ListingStatus.AVAILABLE,
    },
    ListingStatus.REJECTED: {ListingStatus.AVAILABLE},
    # Terminal states
    ListingStatus.SWAPPED: set(),
    ListingStatus.REDEEMED: set(),
}

TERMINAL_STATES = frozenset(
    state for state, targets in TRANSITIONS.items() if not targets
)


class ListingStateMachine:
    """Validates listing status transitions."""

    @staticmethod
    def can_transition(current, target) -> bool:
        return ListingStatus(target) in TRANSITIONS.get(ListingStatus(current), set())

    @staticmethod
    def validate_transition(current, target) -> None:
        """
        Raise InvalidTransitionError unless ``current → target`` is an edge.

        Args:
            current: Current listing status
            target: Requested listing status

        Raises:
            InvalidTransitionError: If the edge is not in the transition table
        """
        if ListingStateMachine.can_transition(current, target):
            return

        current, target = ListingStatus(current), ListingStatus(target)
        allowed = sorted(state.value for state in TRANSITIONS[current])
        raise InvalidTransitionError(
            f"Invalid listing transition: {current.value} → {target.value}. "
            f"Allowed from {current.value}: [{', '.join(allowed)}]"
        )

    @staticmethod
    def is_terminal(state) -> bool:
        """Check if a state is terminal (no further transitions)."""
        return ListingStatus(state) in TERMINAL_STATES

    @staticmethod
    def valid_transitions(state) -> set:
        """Return the set of valid target states from the given state."""
        return set(TRANSITIONS[ListingStatus(state)])
