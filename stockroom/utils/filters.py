"""
Client-side style search, filter and sort pipelines

Work on model instances or plain dicts so the same predicates serve the
repositories' in-memory passes and the client library.
"""

from typing import Any, Iterable, List, Optional

SORT_KEYS = ('name', 'date', 'quantity', 'value')
STOCK_LEVELS = ('all', 'low', 'out')
ACTIVITY_CATEGORIES = ('all', 'item', 'pick_list', 'quantity')

SEARCH_FIELDS = ('name', 'sku', 'barcode', 'description')


def _field(row: Any, name: str):
    if isinstance(row, dict):
        return row.get(name)
    return getattr(row, name, None)


def matches_search(row: Any, query: Optional[str]) -> bool:
    """Case-insensitive substring match across name, SKU, barcode and description"""
    if not query or not query.strip():
        return True
    needle = query.strip().lower()
    for name in SEARCH_FIELDS:
        value = _field(row, name)
        if value and needle in str(value).lower():
            return True
    return False


def is_low_stock(row: Any) -> bool:
    return (_field(row, 'quantity') or 0) <= (_field(row, 'min_quantity') or 0)


def filter_low_stock(rows: Iterable) -> List:
    return [row for row in rows if is_low_stock(row)]


def filter_stock_level(rows: Iterable, level: str = 'all') -> List:
    """
    Filter for the low-stock screen

    all: at or below the threshold, out of stock included
    low: in stock but at or below the threshold
    out: nothing left
    """
    if level not in STOCK_LEVELS:
        raise ValueError(f"Unknown stock level filter: {level}")
    result = []
    for row in rows:
        quantity = _field(row, 'quantity') or 0
        if level == 'out':
            keep = quantity == 0
        elif level == 'low':
            keep = quantity > 0 and is_low_stock(row)
        else:
            keep = is_low_stock(row)
        if keep:
            result.append(row)
    return sorted(result, key=lambda r: _field(r, 'quantity') or 0)


def _name_key(row):
    return (_field(row, 'name') or '').lower()


def sort_items(rows: Iterable, sort_by: str = 'name', descending: bool = False) -> List:
    """
    Stable sort by one of SORT_KEYS

    Ties fall back to name and then to the incoming order. Rows without a
    sell price always sort after priced rows when sorting by value.
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_by}")
    rows = list(rows)
    # Secondary key first; sorted() is stable
    rows.sort(key=_name_key)
    if sort_by == 'name':
        rows.sort(key=_name_key, reverse=descending)
    elif sort_by == 'date':
        rows.sort(key=lambda r: str(_field(r, 'created_at') or ''), reverse=descending)
    elif sort_by == 'quantity':
        rows.sort(key=lambda r: _field(r, 'quantity') or 0, reverse=descending)
    else:
        priced = [r for r in rows if _field(r, 'sell_price') is not None]
        unpriced = [r for r in rows if _field(r, 'sell_price') is None]
        priced.sort(key=lambda r: _field(r, 'sell_price'), reverse=descending)
        rows = priced + unpriced
    return rows


def apply_item_view(rows: Iterable, search: Optional[str] = None, sort_by: str = 'name',
                    low_stock: bool = False, descending: bool = False) -> List:
    """Search, then low-stock filter, then sort"""
    result = [row for row in rows if matches_search(row, search)]
    if low_stock:
        result = filter_low_stock(result)
    return sort_items(result, sort_by, descending)


def matches_activity_category(action_type: str, category: str = 'all') -> bool:
    if category not in ACTIVITY_CATEGORIES:
        raise ValueError(f"Unknown activity filter: {category}")
    if category == 'item':
        return action_type.startswith('item_') and action_type != 'item_picked'
    if category == 'pick_list':
        return action_type.startswith('pick_list_') or action_type == 'item_picked'
    if category == 'quantity':
        return action_type == 'quantity_adjusted'
    return True


def paginate(rows: List, page: int = 1, per_page: int = 20) -> dict:
    """Slice an already filtered list into one page"""
    page = max(page, 1)
    total = len(rows)
    start = (page - 1) * per_page
    return {
        'items': rows[start:start + per_page],
        'pagination': {
            'page': page,
            'per_page': per_page,
            'total': total,
            'pages': (total + per_page - 1) // per_page
        }
    }
