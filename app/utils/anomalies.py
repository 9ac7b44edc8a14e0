from __future__ import annotations

import logging
from typing import Dict, List

from app.models.analytics import AnomalyAlert, CategorySnapshot, Severity

logger = logging.getLogger(__name__)

ALERT_THRESHOLD = 20.0
MEDIUM_THRESHOLD = 35.0
HIGH_THRESHOLD = 50.0

SEVERITY_ORDER: Dict[Severity, int] = {
    Severity.HIGH: 0,
    Severity.MEDIUM: 1,
    Severity.LOW: 2,
}


def classify(percentage_over: float) -> Severity:
    if percentage_over > HIGH_THRESHOLD:
        return Severity.HIGH
    if percentage_over > MEDIUM_THRESHOLD:
        return Severity.MEDIUM
    return Severity.LOW


def detect(
    current: List[CategorySnapshot],
    historical: List[CategorySnapshot],
) -> List[AnomalyAlert]:
    """
    Flag categories whose average ticket this month sits more than 20% above
    their historical average. Categories without a positive baseline are skipped.
    """
    baseline = {snap.category: snap for snap in historical}

    alerts: List[AnomalyAlert] = []
    for snap in current:
        past = baseline.get(snap.category)
        if past is None or past.average <= 0:
            continue

        percentage_over = (snap.average - past.average) / past.average * 100
        if percentage_over <= ALERT_THRESHOLD:
            continue

        alerts.append(
            AnomalyAlert(
                category=snap.category,
                current_amount=round(snap.average, 2),
                average_amount=round(past.average, 2),
                percentage_over=round(percentage_over, 2),
                severity=classify(percentage_over),
                message=f"Unusual spending in {snap.category}: {percentage_over:.0f}% above average",
            )
        )

    alerts.sort(key=lambda alert: SEVERITY_ORDER[alert.severity])
    if alerts:
        logger.debug(f"Detected {len(alerts)} spending anomalies")
    return alerts
