from enum import Enum


class InquiryStatus(str, Enum):
    new = "new"
    contacted = "contacted"
    closed = "closed"


class SupportStatus(str, Enum):
    open = "open"
    in_progress = "in_progress"
    resolved = "resolved"


PROJECT_TYPES = ("website", "ecommerce", "webapp", "redesign", "mobile", "other")
BUDGET_RANGES = ("5k-10k", "10k-25k", "25k-50k", "50k+")
TIMELINES = ("asap", "1-2months", "3-4months", "6months+")


SUPPORT_TRANSITIONS = {
    SupportStatus.open: [SupportStatus.in_progress, SupportStatus.resolved],
    SupportStatus.in_progress: [SupportStatus.open, SupportStatus.resolved],
    # reopened when the client reports the issue again
    SupportStatus.resolved: [SupportStatus.open],
}


def can_change_support_status(current: SupportStatus, target: SupportStatus) -> bool:
    return SupportStatus(target) in SUPPORT_TRANSITIONS.get(SupportStatus(current), [])
