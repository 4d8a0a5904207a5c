"""
Actions Module
Engines that act on the schedule: dose alerts
"""

from .dose_alert_dispatcher import (
    DoseAlert,
    AlertState,
    AlertListener,
    PatientSession,
    DoseAlertDispatcher
)


__all__ = [
    "DoseAlert",
    "AlertState",
    "AlertListener",
    "PatientSession",
    "DoseAlertDispatcher",
]
