from django.urls import path
from .views import (
    artist_list_create, artist_detail, artist_generate_ai,
    artist_bulk_action, artist_export_csv,
)

urlpatterns = [
    path('artists/', artist_list_create, name='artist-list-create'),
    path('artists/generate-ai/', artist_generate_ai, name='artist-generate-ai'),
    path('artists/bulk/', artist_bulk_action, name='artist-bulk-action'),
    path('artists/export/csv/', artist_export_csv, name='artist-export-csv'),
    path('artists/<str:pk>/', artist_detail, name='artist-detail'),
]
