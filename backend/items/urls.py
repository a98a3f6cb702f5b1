from django.urls import path
from .views import (
    item_list_create, item_detail, item_bulk_action, item_export_csv, item_template,
    item_upload_csv, item_ai_analyze, item_detect_duplicates, item_detect_duplicates_status,
    item_compare_images, item_form_options,
)

urlpatterns = [
    path('items/', item_list_create, name='item-list-create'),
    path('items/bulk-action/', item_bulk_action, name='item-bulk-action'),
    path('items/export/csv/', item_export_csv, name='item-export-csv'),
    path('items/templates/<str:kind>/', item_template, name='item-template'),
    path('items/upload/csv/', item_upload_csv, name='item-upload-csv'),
    path('items/ai-analyze/', item_ai_analyze, name='item-ai-analyze'),
    path('items/detect-duplicates/', item_detect_duplicates, name='item-detect-duplicates'),
    path('items/detect-duplicates/status/<str:task_id>/', item_detect_duplicates_status, name='item-detect-duplicates-status'),
    path('items/compare-images/', item_compare_images, name='item-compare-images'),
    path('items/form-options/', item_form_options, name='item-form-options'),
    path('items/<str:pk>/', item_detail, name='item-detail'),
]
