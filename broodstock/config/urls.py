"""
URL configuration for the broodstock sales dashboard API.

Every app mounts its routes under ``api/v1/``; the health probe sits at
``api/health/`` next to it.
"""
from django.urls import path, include

from broodstock.core.views import health_check

urlpatterns = [
    path('api/health/', health_check, name='health'),
    path('api/v1/', include('broodstock.core.urls')),
    path('api/v1/', include('broodstock.customers.urls')),
    path('api/v1/', include('broodstock.orders.urls')),
    path('api/v1/', include('broodstock.batches.urls')),
    path('api/v1/', include('broodstock.dashboard.urls')),
]
