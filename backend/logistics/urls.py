from django.urls import path
from .views import (
    logistics_list_create, logistics_detail, logistics_bulk_action, logistics_export_csv,
    logistics_import_csv, logistics_csv_template, logistics_calculate, logistics_shipping_quote,
)

urlpatterns = [
    path('logistics/', logistics_list_create, name='logistics-list-create'),
    path('logistics/bulk-action/', logistics_bulk_action, name='logistics-bulk-action'),
    path('logistics/export/csv/', logistics_export_csv, name='logistics-export-csv'),
    path('logistics/import/csv/', logistics_import_csv, name='logistics-import-csv'),
    path('logistics/template/csv/', logistics_csv_template, name='logistics-csv-template'),
    path('logistics/calculate/', logistics_calculate, name='logistics-calculate'),
    path('logistics/shipping-quote/', logistics_shipping_quote, name='logistics-shipping-quote'),
    path('logistics/<str:pk>/', logistics_detail, name='logistics-detail'),
]
