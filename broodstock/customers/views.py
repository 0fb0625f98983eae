import copy
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny

from broodstock.core.exports import address_city_country, export_filename, write_csv, write_xlsx
from broodstock.core.responses import envelope_errors, paginate, parse_pagination, success_response
from .mock_data import CUSTOMERS, CUSTOMER_STATS

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    ('Customer ID', 'id'),
    ('Name', 'name'),
    ('Email', 'email'),
    ('Phone', 'phone'),
    ('Location', address_city_country('address')),
    ('Status', 'status'),
    ('Total Orders', 'total_orders'),
    ('Total Value', 'total_value'),
    ('Last Order', 'last_order_date'),
    ('Credentials', 'credential_status'),
]


@api_view(['GET'])
@permission_classes([AllowAny])
@envelope_errors('Customers API')
def customer_list(request):
    """Paginated customer list (limit/offset)"""
    limit, offset = parse_pagination(request)
    customers, pagination = paginate(copy.deepcopy(CUSTOMERS), limit, offset)
    logger.debug(f"Customer list: limit={limit}, offset={offset}, returned={len(customers)}")
    return success_response({
        'customers': customers,
        'pagination': pagination,
    })


@api_view(['GET'])
@permission_classes([AllowAny])
@envelope_errors('Customer stats API')
def customer_stats_summary(request):
    return success_response(copy.deepcopy(CUSTOMER_STATS))


@api_view(['GET'])
@permission_classes([AllowAny])
@envelope_errors('Customer export')
def customer_export(request):
    """Download the customer list as CSV"""
    return write_csv(CUSTOMERS, EXPORT_COLUMNS, export_filename('Customer Report'))


@api_view(['GET'])
@permission_classes([AllowAny])
@envelope_errors('Customer export')
def customer_export_xlsx(request):
    """Download the customer list as an Excel workbook"""
    return write_xlsx(CUSTOMERS, EXPORT_COLUMNS, export_filename('Customer Report', extension='xlsx'))
