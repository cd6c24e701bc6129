from datetime import timedelta

from django.conf import settings
from django.utils import timezone


def eligibility_days():
    return int(getattr(settings, "DONATION_ELIGIBILITY_DAYS", 90))


def next_eligible_date(donor):
    if not donor.last_donation:
        return None
    return donor.last_donation + timedelta(days=eligibility_days())


def is_eligible(donor, today=None):
    nxt = next_eligible_date(donor)
    today = today or timezone.localdate()
    return nxt is None or today >= nxt


def eligibility_report(donor, today=None):
    today = today or timezone.localdate()
    nxt = next_eligible_date(donor)
    eligible = nxt is None or today >= nxt
    return {
        "eligible": eligible,
        "lastDonation": donor.last_donation.isoformat() if donor.last_donation else None,
        "nextEligibleDate": nxt.isoformat() if nxt else None,
        "daysRemaining": 0 if eligible else (nxt - today).days,
        "isAvailable": donor.is_available,
    }
