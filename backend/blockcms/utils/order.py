from blockcms.models.content_type import SORTABLE_COLUMNS

def order_clause(model, order, allowed=SORTABLE_COLUMNS):
    """
    Turns "name" / "-created_at" into an ORDER BY clause for `model`.
    Returns None for unknown or blank columns.
    """
    if not order:
        return None

    descending = order.startswith("-")
    column = order.lstrip("-").strip()
    if column not in allowed:
        return None

    attr = getattr(model, column)
    return attr.desc() if descending else attr.asc()
