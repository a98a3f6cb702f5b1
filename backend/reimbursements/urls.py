from django.urls import path
from .views import (
    reimbursement_list_create, reimbursement_pending_approvals, reimbursement_detail,
    reimbursement_approve, reimbursement_complete_payment, reimbursement_stats,
)

urlpatterns = [
    path('reimbursements/', reimbursement_list_create, name='reimbursement-list-create'),
    path('reimbursements/stats/', reimbursement_stats, name='reimbursement-stats'),
    path('reimbursements/pending-approvals/', reimbursement_pending_approvals, name='reimbursement-pending-approvals'),
    path('reimbursements/<str:pk>/', reimbursement_detail, name='reimbursement-detail'),
    path('reimbursements/<str:pk>/approve-<str:stage>/', reimbursement_approve, name='reimbursement-approve'),
    path('reimbursements/<str:pk>/complete-payment/', reimbursement_complete_payment,
         name='reimbursement-complete-payment'),
]
