from django.urls import path
from .views import (
    school_list_create, school_detail, school_generate_ai,
    school_bulk_action, school_export_csv,
)

urlpatterns = [
    path('schools/', school_list_create, name='school-list-create'),
    path('schools/generate-ai/', school_generate_ai, name='school-generate-ai'),
    path('schools/bulk/', school_bulk_action, name='school-bulk-action'),
    path('schools/export/csv/', school_export_csv, name='school-export-csv'),
    path('schools/<str:pk>/', school_detail, name='school-detail'),
]
