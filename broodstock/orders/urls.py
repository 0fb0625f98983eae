from django.urls import path
from .views import order_list, order_stats_summary, order_export, order_export_xlsx

urlpatterns = [
    path('orders/', order_list, name='order-list'),
    path('orders/stats/summary/', order_stats_summary, name='order-stats-summary'),
    path('orders/export/', order_export, name='order-export'),
    path('orders/export/xlsx/', order_export_xlsx, name='order-export-xlsx'),
]
