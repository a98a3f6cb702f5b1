from django.urls import path
from .views import (
    consignment_list_create, consignment_detail, consignment_artworks, consignment_bulk_action,
    consignment_export_csv, consignment_import_csv, consignment_csv_template,
    consignment_presale_options, consignment_receipt_pdf, consignment_presale_invoice_pdf,
    consignment_collection_receipt_pdf, consignment_custom_report_pdf, public_consignment_pdf,
)

urlpatterns = [
    path('consignments/', consignment_list_create, name='consignment-list-create'),
    path('consignments/bulk-action/', consignment_bulk_action, name='consignment-bulk-action'),
    path('consignments/export/csv/', consignment_export_csv, name='consignment-export-csv'),
    path('consignments/import/csv/', consignment_import_csv, name='consignment-import-csv'),
    path('consignments/template/csv/', consignment_csv_template, name='consignment-csv-template'),
    path('consignments/custom-report-pdf/', consignment_custom_report_pdf, name='consignment-custom-report-pdf'),
    path('consignments/<str:pk>/', consignment_detail, name='consignment-detail'),
    path('consignments/<str:pk>/artworks/', consignment_artworks, name='consignment-artworks'),
    path('consignments/<str:pk>/presale-options/', consignment_presale_options, name='consignment-presale-options'),
    path('consignments/<str:pk>/receipt-pdf/', consignment_receipt_pdf, name='consignment-receipt-pdf'),
    path('consignments/<str:pk>/presale-invoice-pdf/', consignment_presale_invoice_pdf,
         name='consignment-presale-invoice-pdf'),
    path('consignments/<str:pk>/presale-invoice-pdf/<str:auction_id>/', consignment_presale_invoice_pdf,
         name='consignment-auction-presale-invoice-pdf'),
    path('consignments/<str:pk>/collection-receipt-pdf/', consignment_collection_receipt_pdf,
         name='consignment-collection-receipt-pdf'),
    path('public/consignments/<str:pk>/<str:document>/', public_consignment_pdf, name='public-consignment-pdf'),
]
