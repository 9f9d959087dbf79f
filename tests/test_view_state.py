import pytest

from liquidtrack.api.pages import format_date
from liquidtrack.api.view_state import ViewState, filter_issues
from liquidtrack.domain.issues import IssueStatus, find_person
from liquidtrack.i18n import coerce_language, status_label, text, toggle_language
from tests.conftest import make_issue


def test_filter_matches_title_or_description_case_insensitively() -> None:
    issues = [
        make_issue("1", title="Customs hold", description="Papers missing"),
        make_issue("2", title="Truck", description="DELAY near Tver"),
    ]

    assert [issue.id for issue in filter_issues(issues, "delay")] == ["2"]
    assert [issue.id for issue in filter_issues(issues, "customs")] == ["1"]
    assert [issue.id for issue in filter_issues(issues, "")] == ["1", "2"]
    assert filter_issues(issues, "ferry") == []


def test_take_alert_clears_it() -> None:
    state = ViewState(alert="Failed to add issue")

    assert state.take_alert() == "Failed to add issue"
    assert state.take_alert() is None


def test_dates_follow_language() -> None:
    issue = make_issue("1")

    assert format_date(issue, "en") == "05/01/2024"
    assert format_date(issue, "ru") == "01.05.2024"


def test_unknown_status_parses_as_new() -> None:
    assert IssueStatus.parse("Lost at sea") is IssueStatus.NEW
    assert IssueStatus.parse("Delivery") is IssueStatus.DELIVERY


def test_unknown_responsible_has_no_person() -> None:
    assert find_person("9") is None
    assert find_person("2").name == "Elena Petrova"


def test_language_helpers() -> None:
    assert coerce_language("de") == "ru"
    assert coerce_language("en") == "en"
    assert toggle_language("en") == "ru"
    assert toggle_language("ru") == "en"
    assert status_label("ru", IssueStatus.CUSTOMS) == "На таможне"
    assert text("en", "buttons.delete") == "Delete Issue"


def test_text_rejects_partial_keys() -> None:
    with pytest.raises(KeyError):
        text("en", "buttons")


def test_search_term_is_not_trimmed() -> None:
    issues = [make_issue("1", title="Delayed shipment", description="Port hold")]

    assert filter_issues(issues, "delay ") == []
    assert filter_issues(issues, " ") == []
    assert [issue.id for issue in filter_issues(issues, "delayed ")] == ["1"]


def test_date_format_is_a_translated_string() -> None:
    assert text("en", "date_format") == "%m/%d/%Y"
    assert text("ru", "date_format") == "%d.%m.%Y"
    assert status_label("en", IssueStatus.STUCK) == "Stuck"
