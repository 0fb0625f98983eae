import copy

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny

from broodstock.core.responses import envelope_errors, success_response
from .mock_data import BATCH_STATS


@api_view(['GET'])
@permission_classes([AllowAny])
@envelope_errors('Batch stats API')
def batch_stats_summary(request):
    """Population, survival, biomass and health-bucket aggregates"""
    return success_response(copy.deepcopy(BATCH_STATS))
