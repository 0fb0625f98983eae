import copy
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny

from broodstock.core.exports import address_city_country, export_filename, write_csv, write_xlsx
from broodstock.core.responses import envelope_errors, paginate, parse_pagination, success_response
from .mock_data import ORDERS, ORDER_STATS

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    ('Order Number', 'order_number'),
    ('Customer', 'customer_name'),
    ('Order Date', 'order_date'),
    ('Species', 'species'),
    ('Strain', 'strain'),
    ('Quantity', 'quantity'),
    ('Unit Price', 'unit_price'),
    ('Total Amount', 'total_amount'),
    ('Currency', 'currency'),
    ('Status', 'status'),
    ('Shipment', 'shipment_status'),
    ('Destination', address_city_country('delivery_address')),
]


@api_view(['GET'])
@permission_classes([AllowAny])
@envelope_errors('Orders API')
def order_list(request):
    """Paginated order list (limit/offset)"""
    limit, offset = parse_pagination(request)
    orders, pagination = paginate(copy.deepcopy(ORDERS), limit, offset)
    logger.debug(f"Order list: limit={limit}, offset={offset}, returned={len(orders)}")
    return success_response({
        'orders': orders,
        'pagination': pagination,
    })


@api_view(['GET'])
@permission_classes([AllowAny])
@envelope_errors('Order stats API')
def order_stats_summary(request):
    return success_response(copy.deepcopy(ORDER_STATS))


@api_view(['GET'])
@permission_classes([AllowAny])
@envelope_errors('Order export')
def order_export(request):
    """Download the order list as CSV"""
    return write_csv(ORDERS, EXPORT_COLUMNS, export_filename('Orders Report'))


@api_view(['GET'])
@permission_classes([AllowAny])
@envelope_errors('Order export')
def order_export_xlsx(request):
    """Download the order list as an Excel workbook"""
    return write_xlsx(ORDERS, EXPORT_COLUMNS, export_filename('Orders Report', extension='xlsx'))
