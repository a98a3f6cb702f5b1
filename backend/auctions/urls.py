from django.urls import path
from .views import (
    auction_list_create, auction_detail, auction_status_counts, auction_brand_counts,
    auction_bulk_action, auction_export_csv, auction_import_csv, auction_csv_template,
    auction_invoices, auction_import_eoa, auction_export_eoa_csv, auction_generate_passed,
    auction_export_platform, auction_export_images,
)

urlpatterns = [
    path('auctions/', auction_list_create, name='auction-list-create'),
    path('auctions/counts/status/', auction_status_counts, name='auction-status-counts'),
    path('auctions/counts/brands/', auction_brand_counts, name='auction-brand-counts'),
    path('auctions/bulk-action/', auction_bulk_action, name='auction-bulk-action'),
    path('auctions/export/csv/', auction_export_csv, name='auction-export-csv'),
    path('auctions/import/csv/', auction_import_csv, name='auction-import-csv'),
    path('auctions/template/csv/', auction_csv_template, name='auction-csv-template'),
    path('auctions/import-eoa/', auction_import_eoa, name='auction-import-eoa'),
    path('auctions/<str:pk>/', auction_detail, name='auction-detail'),
    path('auctions/<str:pk>/invoices/', auction_invoices, name='auction-invoices'),
    path('auctions/<str:pk>/export-eoa-csv/', auction_export_eoa_csv, name='auction-export-eoa-csv'),
    path('auctions/<str:pk>/generate-passed/', auction_generate_passed, name='auction-generate-passed'),
    path('auctions/<str:pk>/export/<str:platform>/', auction_export_platform, name='auction-export-platform'),
    path('auctions/<str:pk>/export-images/<str:platform>/', auction_export_images, name='auction-export-images'),
]
