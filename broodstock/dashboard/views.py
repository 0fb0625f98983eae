import copy

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny

from broodstock.core.responses import envelope_errors, success_response
from .mock_data import DASHBOARD_STATS


@api_view(['GET'])
@permission_classes([AllowAny])
@envelope_errors('Dashboard stats API')
def dashboard_stats(request):
    """KPI summary: revenue, orders, customers, batches, alerts and trends"""
    return success_response(copy.deepcopy(DASHBOARD_STATS))
