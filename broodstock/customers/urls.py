from django.urls import path
from .views import customer_list, customer_stats_summary, customer_export, customer_export_xlsx

urlpatterns = [
    path('customers/', customer_list, name='customer-list'),
    path('customers/stats/summary/', customer_stats_summary, name='customer-stats-summary'),
    path('customers/export/', customer_export, name='customer-export'),
    path('customers/export/xlsx/', customer_export_xlsx, name='customer-export-xlsx'),
]
