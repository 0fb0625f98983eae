"""Fixed order records and summary statistics served by the mock API"""

ORDER_STATUSES = ('pending', 'processing', 'completed', 'cancelled')

ORDERS = (
    {
        'id': '1',
        'order_number': 'ORD-2024-001',
        'customer_id': 'CUST-001',
        'customer_name': 'Pacific Aquaculture Ltd',
        'order_date': '2024-01-15',
        'species': 'Penaeus vannamei',
        'strain': 'SPF',
        'quantity': 50000,
        'unit': 'pieces',
        'unit_price': 0.15,
        'total_amount': 7500,
        'currency': 'USD',
        'status': 'completed',
        'shipment_status': 'delivered',
        'delivery_address': {
            'street': '123 Marine Drive',
            'city': 'Vancouver',
            'state': 'BC',
            'country': 'Canada',
            'postal_code': 'V6B 1A1',
        },
    },
    {
        'id': '2',
        'order_number': 'ORD-2024-002',
        'customer_id': 'CUST-002',
        'customer_name': 'Bangkok Shrimp Farm',
        'order_date': '2024-01-20',
        'species': 'Penaeus monodon',
        'strain': 'Wild',
        'quantity': 25000,
        'unit': 'pieces',
        'unit_price': 0.18,
        'total_amount': 4500,
        'currency': 'THB',
        'status': 'processing',
        'shipment_status': 'pending',
        'delivery_address': {
            'street': '456 Fishery Road',
            'city': 'Bangkok',
            'state': 'Bangkok',
            'country': 'Thailand',
            'postal_code': '10100',
        },
    },
    {
        'id': '3',
        'order_number': 'ORD-2024-003',
        'customer_id': 'CUST-003',
        'customer_name': 'Coastal Farms Inc',
        'order_date': '2024-01-25',
        'species': 'Penaeus vannamei',
        'strain': 'High Health',
        'quantity': 75000,
        'unit': 'pieces',
        'unit_price': 0.12,
        'total_amount': 9000,
        'currency': 'USD',
        'status': 'pending',
        'shipment_status': 'pending',
        'delivery_address': {
            'street': '789 Coastal Highway',
            'city': 'Miami',
            'state': 'FL',
            'country': 'USA',
            'postal_code': '33101',
        },
    },
)

ORDER_STATS = {
    'total_orders': 1247,
    'pending_orders': 89,
    'completed_orders': 1098,
    'cancelled_orders': 60,
    'total_revenue': 2847650,
    'monthly_revenue': 234500,
    'average_order_value': 2285,
    'order_growth_rate': 12.5,
    'top_species': [
        {'species': 'Penaeus vannamei', 'count': 834, 'revenue': 1923400},
        {'species': 'Penaeus monodon', 'count': 267, 'revenue': 578920},
        {'species': 'Penaeus stylirostris', 'count': 146, 'revenue': 345330},
    ],
    'monthly_trends': [
        {'month': 'Jan', 'orders': 98, 'revenue': 245600},
        {'month': 'Feb', 'orders': 112, 'revenue': 267800},
        {'month': 'Mar', 'orders': 105, 'revenue': 234500},
        {'month': 'Apr', 'orders': 128, 'revenue': 289400},
        {'month': 'May', 'orders': 134, 'revenue': 298750},
        {'month': 'Jun', 'orders': 142, 'revenue': 315600},
    ],
    'regional_distribution': [
        {'region': 'North America', 'orders': 456, 'revenue': 1245800},
        {'region': 'Southeast Asia', 'orders': 523, 'revenue': 1089650},
        {'region': 'Europe', 'orders': 189, 'revenue': 378900},
        {'region': 'Australia', 'orders': 79, 'revenue': 133300},
    ],
}
