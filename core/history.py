from .models import History


def record(identity, action, **details):
    """Write one audit row for ``identity`` (any Donor / Hospital / AdminAccount)."""
    return History.objects.create(
        user_id=identity.pk,
        user_type=identity.user_type,
        action=action,
        details=details,
    )
