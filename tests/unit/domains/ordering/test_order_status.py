"""
Unit tests for OrderStatus and its transition table.
"""

import pytest

from orderflow.core.domain import ErrorKind
from orderflow.domains.ordering.domain import InvalidStatusException, OrderStatus


@pytest.mark.unit
class TestParse:
    @pytest.mark.parametrize("raw", ["Shipped", "shipped", "  SHIPPED "])
    def test_case_insensitive(self, raw):
        assert OrderStatus.parse(raw) is OrderStatus.SHIPPED

    @pytest.mark.parametrize("raw", ["Returned", "", 3, None])
    def test_unknown_values_are_invalid_state(self, raw):
        with pytest.raises(InvalidStatusException) as exc_info:
            OrderStatus.parse(raw)
        assert exc_info.value.kind is ErrorKind.INVALID_STATE


@pytest.mark.unit
class TestTransitions:
    def test_forward_path(self):
        assert OrderStatus.PENDING.can_transition_to(OrderStatus.PROCESSING)
        assert OrderStatus.PROCESSING.can_transition_to(OrderStatus.SHIPPED)
        assert OrderStatus.SHIPPED.can_transition_to(OrderStatus.DELIVERED)

    @pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.PROCESSING, OrderStatus.SHIPPED])
    def test_non_terminal_statuses_can_be_cancelled(self, status):
        assert status.can_be_cancelled()

    def test_backwards_and_same_status_are_rejected(self):
        assert not OrderStatus.SHIPPED.can_transition_to(OrderStatus.PROCESSING)
        assert not OrderStatus.PENDING.can_transition_to(OrderStatus.PENDING)

    @pytest.mark.parametrize("terminal", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_terminal_statuses_absorb(self, terminal):
        assert terminal.is_terminal()
        assert terminal.get_valid_transitions() == []
        assert all(not terminal.can_transition_to(target) for target in OrderStatus)
