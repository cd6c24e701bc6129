from django.db.models import Q

from accounts.models import Donor
from blood.eligibility import is_eligible


# -------- Blood compatibility (donor groups allowed for recipient) --------
COMPATIBLE_DONORS = {
    "O-": {"O-"},
    "O+": {"O-", "O+"},
    "A-": {"O-", "A-"},
    "A+": {"O-", "O+", "A-", "A+"},
    "B-": {"O-", "B-"},
    "B+": {"O-", "O+", "B-", "B+"},
    "AB-": {"O-", "A-", "B-", "AB-"},
    "AB+": {"O-", "O+", "A-", "A+", "B-", "B+", "AB-", "AB+"},
}

# common spellings hospitals and donors type for the same city
CITY_CANON = {
    "bombay": "mumbai",
    "mumbai": "mumbai",
    "navi mumbai": "mumbai",
    "delhi": "delhi",
    "new delhi": "delhi",
    "ncr": "delhi",
    "bangalore": "bengaluru",
    "bengaluru": "bengaluru",
    "blr": "bengaluru",
    "calcutta": "kolkata",
    "kolkata": "kolkata",
    "madras": "chennai",
    "chennai": "chennai",
    "poona": "pune",
    "pune": "pune",
}


def canonical_city(value):
    """
    Normalize free-text city input:
      - "Bombay"              -> "mumbai"
      - "Andheri, Mumbai"     -> "mumbai"
      - "Some Town"           -> "some town"
    """
    raw = " ".join((value or "").strip().lower().split())
    if not raw:
        return ""
    if raw in CITY_CANON:
        return CITY_CANON[raw]

    # the last comma separated part is usually the city
    parts = [p.strip() for p in raw.replace(";", ",").replace("/", ",").split(",") if p.strip()]
    for p in reversed(parts):
        if p in CITY_CANON:
            return CITY_CANON[p]
    return parts[-1] if parts else raw


def city_aliases(value):
    canon = canonical_city(value)
    if not canon:
        return set()
    return {alias for alias, c in CITY_CANON.items() if c == canon} | {canon}


def compatible_groups(recipient_group):
    return COMPATIBLE_DONORS.get((recipient_group or "").strip().upper(), set())


def search_donors(blood_group=None, city=None, compatible=False, eligible_only=False):
    """
    Available donors, optionally narrowed by blood group (exact, or every
    compatible donor group when `compatible` is set) and by city aliases.
    """
    qs = Donor.objects.filter(is_available=True).order_by("name")

    if blood_group:
        group = blood_group.strip().upper()
        groups = compatible_groups(group) if compatible else {group}
        qs = qs.filter(blood_group__in=groups)

    if city:
        q = Q()
        for alias in city_aliases(city):
            q |= Q(city__iexact=alias)
        qs = qs.filter(q)

    if eligible_only:
        return [d for d in qs if is_eligible(d)]
    return list(qs)
