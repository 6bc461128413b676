# tests/test_selection.py
from datetime import date

from core.models import Project, Transaction, TransactionType
from ui.components.selection import RecordChoices
from ui.views.projects import describe_project
from ui.views.transactions import describe_transaction


def test_same_label_records_stay_selectable():
    projects = [Project(id="1", name="Website"), Project(id="2", name="Website")]
    choices = RecordChoices(projects, describe_project)

    assert choices.ids == ["1", "2"]
    assert choices.label("1") == choices.label("2")
    assert choices.get("2") is projects[1]


def test_identical_transactions_are_distinct():
    txns = [
        Transaction(id=str(i), type=TransactionType.EXPENSE, category="Travel", amount=5000, date=date(2026, 3, 1))
        for i in (1, 2)
    ]
    choices = RecordChoices(txns, describe_transaction)

    assert [choices.get(i).id for i in choices.ids] == ["1", "2"]


def test_optional_choice_maps_to_id():
    projects = [Project(id="7", name="Website"), Project(id="8", name="Website")]
    choices = RecordChoices(projects, describe_project, none_label="(none)")

    assert choices.ids == [None, "7", "8"]
    assert choices.label(None) == "(none)"
    assert choices.get(None) is None
    assert choices.get("8").id == "8"
