# transactions/policies.py
from .models import DiscountReason


def discount_reason_taken(reason: str, exclude_id=None) -> bool:
    qs = DiscountReason.objects.filter(reason=reason)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.exists()
