from django.urls import path
from .views import (
    client_list_create, client_detail, client_overview, client_lookup, client_bulk_action,
    client_export_csv, client_import_csv, client_csv_template,
)

urlpatterns = [
    path('clients/', client_list_create, name='client-list-create'),
    path('clients/bulk-action/', client_bulk_action, name='client-bulk-action'),
    path('clients/export/csv/', client_export_csv, name='client-export-csv'),
    path('clients/import/csv/', client_import_csv, name='client-import-csv'),
    path('clients/template/csv/', client_csv_template, name='client-csv-template'),
    path('clients/lookup/<str:display_id>/', client_lookup, name='client-lookup'),
    path('clients/<str:pk>/', client_detail, name='client-detail'),
    path('clients/<str:pk>/overview/', client_overview, name='client-overview'),
]
