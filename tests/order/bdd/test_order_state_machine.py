"""BDD tests for staff moving orders through their statuses."""

from protean.exceptions import ValidationError
from pytest_bdd import parsers, scenarios, then, when
from storefront.order.order import HistoryKind

scenarios("features/order_state_machine.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('staff move the order to "{status}"'))
def move_order(order, status, error):
    try:
        order.update_status(status, user_id="staff-bdd")
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('staff add the note "{note}"'))
def add_note(order, note):
    order.add_note(note, user_id="staff-bdd")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order history reads "{statuses}"'))
def history_reads(order, statuses):
    recorded = [e.status for e in order.status_history if e.kind == HistoryKind.STATUS_CHANGE.value]
    assert recorded == [s.strip() for s in statuses.split(",")]


@then(parsers.cfparse('the last history entry is the note "{note}"'))
def last_entry_is_note(order, note):
    entry = order.status_history[-1]
    assert entry.kind == HistoryKind.NOTE.value
    assert entry.note == note
