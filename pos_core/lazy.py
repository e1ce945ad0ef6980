from datetime import date, timedelta, timezone, tzinfo
from typing import Iterable, Iterator, Optional, Tuple
from .domain import Transaction
from .timeutils import local_midnight, nanos_from_dt


## ленивый генератор транзакций за период [start_date, end_date] включительно
## end_date покрывает весь день, до следующей полуночи
def iter_transactions_between(
    transactions: Iterable[Transaction],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    tz: tzinfo = timezone.utc,
) -> Iterator[Transaction]:
    lower = nanos_from_dt(local_midnight(start_date, tz)) if start_date else None
    upper = (
        nanos_from_dt(local_midnight(end_date + timedelta(days=1), tz))
        if end_date
        else None
    )
    for tx in transactions:
        if lower is not None and tx.timestamp < lower:
            continue
        if upper is not None and tx.timestamp >= upper:
            continue
        yield tx


## сначала самые свежие
def recent_first(transactions: Iterable[Transaction]) -> Tuple[Transaction, ...]:
    return tuple(sorted(transactions, key=lambda t: t.timestamp, reverse=True))
