from django.urls import path
from .views import batch_stats_summary

urlpatterns = [
    path('batches/stats/summary/', batch_stats_summary, name='batch-stats-summary'),
]
