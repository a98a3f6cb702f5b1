from django.urls import path
from .views import (
    gallery_list_create, gallery_detail, gallery_generate_ai,
    gallery_bulk_action, gallery_export_csv, gallery_import_csv,
)

urlpatterns = [
    path('galleries/', gallery_list_create, name='gallery-list-create'),
    path('galleries/generate-ai/', gallery_generate_ai, name='gallery-generate-ai'),
    path('galleries/bulk/', gallery_bulk_action, name='gallery-bulk-action'),
    path('galleries/export/csv/', gallery_export_csv, name='gallery-export-csv'),
    path('galleries/import/csv/', gallery_import_csv, name='gallery-import-csv'),
    path('galleries/<str:pk>/', gallery_detail, name='gallery-detail'),
]
