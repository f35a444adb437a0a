from django.urls import path

from . import views

urlpatterns = [
    path('receptionist-sales', views.receptionist_sales.collection_view(), name='receptionist_sales'),
    path('receptionist-sales/<int:pk>', views.receptionist_sales.detail_view(), name='receptionist_sale_detail'),
    path('storekeeper-entries', views.storekeeper_entries.collection_view(), name='storekeeper_entries'),
    path('storekeeper-entries/<int:pk>', views.storekeeper_entries.detail_view(), name='storekeeper_entry_detail'),
    path('settlements', views.settlements, name='settlements'),
    path('settlements/<int:pk>', views.settlement_detail, name='settlement_detail'),
    path('settlement-payments', views.settlement_payments, name='settlement_payments'),
    path('settlement-payments/<int:pk>', views.settlement_payment_detail, name='settlement_payment_detail'),
    path('settlement-payments/settlement/<int:settlement_id>', views.payments_for_settlement,
         name='settlement_payments_for_settlement'),
]
