from collections import defaultdict
from datetime import datetime, timezone, tzinfo
from decimal import Decimal, ROUND_HALF_UP
from functools import reduce
from typing import Callable, Dict, Iterable, List, Tuple
from pos_core.domain import Product, ReportBucket, Transaction
from pos_core.timeutils import dt_from_nanos, start_of_day, start_of_month, start_of_week


# ============ Периоды отчёта ============

# granularity -> (усечение до начала периода, подпись периода)
PERIODS: Dict[str, Tuple[Callable[[datetime], datetime], Callable[[datetime], str]]] = {
    "daily": (start_of_day, lambda d: d.strftime("%A, %b %d, %Y")),
    "weekly": (start_of_week, lambda d: d.strftime("Week of %b %d, %Y")),
    "monthly": (start_of_month, lambda d: d.strftime("%B %Y")),
}


def group_transactions_by_period(
    transactions: Iterable[Transaction],
    granularity: str,
    tz: tzinfo = timezone.utc,
) -> List[ReportBucket]:
    """
    Группирует транзакции по дням / неделям (с понедельника) / месяцам.
    Ключ группы: начало периода, а не исходная метка времени.
    Результат: от самого свежего периода к самому старому.
    """
    if granularity not in PERIODS:
        raise ValueError(
            f"Unknown granularity '{granularity}', expected one of {sorted(PERIODS)}"
        )
    truncate, label = PERIODS[granularity]

    totals: Dict[datetime, int] = defaultdict(int)
    counts: Dict[datetime, int] = defaultdict(int)
    for tx in transactions:
        key = truncate(dt_from_nanos(tx.timestamp, tz))
        totals[key] += tx.total_amount
        counts[key] += 1

    # сортировка по началу периода, не по строке подписи
    return [
        ReportBucket(
            period=label(start),
            start=start,
            total=totals[start],
            transaction_count=counts[start],
        )
        for start in sorted(totals, reverse=True)
    ]


# ============ Сводка ============


def total_sales(transactions: Iterable[Transaction]) -> int:
    return reduce(lambda acc, tx: acc + tx.total_amount, transactions, 0)


def sales_summary(transactions: Tuple[Transaction, ...]) -> dict:
    """Итого, количество и средний чек (округление до целого)"""
    total = total_sales(transactions)
    count = len(transactions)
    average = (
        int((Decimal(total) / count).quantize(Decimal(1), rounding=ROUND_HALF_UP))
        if count > 0
        else 0
    )
    return {
        "total_sales": total,
        "transaction_count": count,
        "average_sale": average,
    }


# ============ Отчёт по товарам ============


def bestsellers_report(
    transactions: Iterable[Transaction], products: Iterable[Product], k: int = 10
) -> List[dict]:
    """
    Топ-K товаров по проданному количеству.
    Выручка берётся из line_total строк, то есть уже с пакетными ценами.
    """

    def accumulate(acc: dict, tx: Transaction) -> dict:
        def add_item(inner: dict, item) -> dict:
            qty, revenue = inner.get(item.product_id, (0, 0))
            return {
                **inner,
                item.product_id: (qty + item.quantity, revenue + item.line_total),
            }

        return reduce(add_item, tx.items, acc)

    sold = reduce(accumulate, transactions, {})
    names = {p.id: p.name for p in products}

    ranked = sorted(sold.items(), key=lambda item: item[1][0], reverse=True)[:k]
    return [
        {
            "product_id": pid,
            "name": names.get(pid, f"Product #{pid}"),
            "quantity_sold": qty,
            "revenue": revenue,
        }
        for pid, (qty, revenue) in ranked
    ]
