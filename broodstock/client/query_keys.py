"""
Query key registry for the client data layer.

A key is a tuple ``(resource, *params)``. Keys are compared structurally and
filters match by prefix, so ``query_keys.customers`` covers every key that
starts with ``'customers'`` while ``query_keys.customer_stats`` covers only
the stats entry.
"""


def freeze(value):
    """Turn lists/dicts inside a key into hashable equivalents"""
    if isinstance(value, dict):
        return frozenset((k, freeze(v)) for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    if isinstance(value, set):
        return frozenset(freeze(v) for v in value)
    return value


def normalize_key(key):
    if isinstance(key, str):
        return (key,)
    return freeze(tuple(key))


def matches_key(key, key_filter):
    """True when ``key_filter`` is a prefix of ``key`` (None matches everything)"""
    if key_filter is None:
        return True
    key_filter = normalize_key(key_filter)
    return key[:len(key_filter)] == key_filter


class QueryKeys:
    # Authentication
    current_user = ('auth', 'currentUser')

    # Customers
    customers = ('customers',)
    customer_stats = ('customers', 'stats')

    @staticmethod
    def customer(customer_id):
        return ('customers', customer_id)

    @staticmethod
    def customer_analytics(customer_id):
        return ('customers', 'analytics', customer_id)

    @staticmethod
    def nearby_customers(lat, lng, radius):
        return ('customers', 'nearby', lat, lng, radius)

    # Orders
    orders = ('orders',)
    order_stats = ('orders', 'stats')

    @staticmethod
    def order(order_id):
        return ('orders', order_id)

    @staticmethod
    def revenue_by_month(months):
        return ('orders', 'revenue', months)

    @staticmethod
    def top_species(limit, days):
        return ('orders', 'species', limit, days)

    @staticmethod
    def customer_orders(customer_id):
        return ('orders', 'customer', customer_id)

    # Broodstock batches
    batches = ('batches',)
    batch_stats = ('batches', 'stats')
    available_batches = ('batches', 'available')

    @staticmethod
    def batch(batch_id):
        return ('batches', batch_id)

    @staticmethod
    def low_stock_batches(threshold):
        return ('batches', 'lowStock', threshold)

    # Business logic
    @staticmethod
    def recommended_pricing(species, quantity, customer_id=None):
        return ('business', 'pricing', species, quantity, customer_id)

    @staticmethod
    def customer_tier(customer_id):
        return ('business', 'tier', customer_id)

    @staticmethod
    def order_calculation(data):
        return ('business', 'calculate', freeze(data))

    # Dashboard
    dashboard_stats = ('dashboard', 'stats')
    dashboard_charts = ('dashboard', 'charts')
    sales_chart = ('dashboard', 'salesChart')
    customer_locations = ('dashboard', 'customerLocations')


query_keys = QueryKeys()
