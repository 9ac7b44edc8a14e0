from datetime import date

from app.models.analytics import CategorySnapshot, Severity
from app.utils.aggregation import category_totals
from app.utils.anomalies import detect
from tests.factories import make_txn


def snap(category, average, count=2):
    return CategorySnapshot(category=category, total=average * count, count=count, average=average)


historical = [
    snap("Food", 100.0),
    snap("Transport", 100.0),
    snap("Leisure", 100.0),
    snap("Rent", 100.0),
    snap("Gifts", 0.0, count=0),
]


def test_exactly_fifty_percent_is_medium():
    alerts = detect([snap("Food", 150.0)], historical)
    assert len(alerts) == 1
    assert alerts[0].percentage_over == 50.0
    assert alerts[0].severity is Severity.MEDIUM


def test_above_fifty_percent_is_high():
    alerts = detect([snap("Food", 151.0)], historical)
    assert alerts[0].severity is Severity.HIGH
    assert alerts[0].current_amount == 151.0
    assert alerts[0].average_amount == 100.0
    assert alerts[0].message == "Unusual spending in Food: 51% above average"


def test_severity_boundaries():
    assert detect([snap("Food", 136.0)], historical)[0].severity is Severity.MEDIUM
    assert detect([snap("Food", 135.0)], historical)[0].severity is Severity.LOW
    assert detect([snap("Food", 121.0)], historical)[0].severity is Severity.LOW


def test_twenty_percent_or_less_is_not_an_anomaly():
    assert detect([snap("Food", 120.0)], historical) == []
    assert detect([snap("Food", 80.0)], historical) == []


def test_no_baseline_means_no_alert():
    assert detect([snap("Travel", 900.0)], historical) == []
    assert detect([snap("Gifts", 900.0)], historical) == []
    assert detect([snap("Food", 900.0)], []) == []


def test_alerts_sorted_by_severity():
    current = [snap("Food", 125.0), snap("Transport", 140.0), snap("Leisure", 300.0), snap("Rent", 99.0)]
    alerts = detect(current, historical)
    assert [(a.category, a.severity) for a in alerts] == [
        ("Leisure", Severity.HIGH),
        ("Transport", Severity.MEDIUM),
        ("Food", Severity.LOW),
    ]


def test_severity_uses_unrounded_category_average():
    past = category_totals([make_txn(date(2025, 1, 5), 100.0), make_txn(date(2025, 2, 5), 100.0)])
    current = category_totals(
        [
            make_txn(date(2025, 3, 1), 150.0),
            make_txn(date(2025, 3, 2), 150.0),
            make_txn(date(2025, 3, 3), 150.01),
        ]
    )
    assert current[0].average > 150.0

    alerts = detect(current, past)
    assert alerts[0].severity is Severity.HIGH
    assert alerts[0].percentage_over == 50.0


def test_percentage_over_keeps_two_decimals():
    alerts = detect([snap("Food", 151.234)], historical)
    assert alerts[0].percentage_over == 51.23
    assert alerts[0].message == "Unusual spending in Food: 51% above average"
