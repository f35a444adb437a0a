from django.urls import path

from . import views

urlpatterns = [
    path('employees', views.employees.collection_view(), name='employees'),
    path('employees/<int:pk>', views.employees.detail_view(), name='employee_detail'),
    path('sales', views.sales.collection_view(), name='sales'),
    path('sales/<int:pk>', views.sales.detail_view(), name='sale_detail'),
    path('expenses', views.expenses.collection_view(), name='expenses'),
    path('expenses/batch', views.expense_batch, name='expense_batch'),
    path('expenses/<int:pk>', views.expenses.detail_view(), name='expense_detail'),
    path('material-purchases', views.material_purchases.collection_view(), name='material_purchases'),
    path('material-purchases/<int:pk>', views.material_purchases.detail_view(), name='material_purchase_detail'),
    path('packer-entries', views.packer_entries.collection_view(), name='packer_entries'),
    path('packer-entries/<int:pk>', views.packer_entries.detail_view(), name='packer_entry_detail'),
    path('salary-payments', views.salary_payments.collection_view(), name='salary_payments'),
    path('salary-payments/<int:pk>', views.salary_payments.detail_view(), name='salary_payment_detail'),
    path('audit-logs', views.audit_logs.collection_view(), name='audit_logs'),
    # Derived figures
    path('inventory/status', views.inventory_status, name='inventory_status'),
    path('inventory/breakdown', views.inventory_breakdown, name='inventory_breakdown'),
    path('commissions/summary', views.commissions_summary, name='commissions_summary'),
    path('commissions/<int:employee_id>', views.employee_commission, name='employee_commission'),
    path('salary-projection/<int:employee_id>', views.salary_projection, name='salary_projection'),
    path('reports/financial', views.financial_report, name='financial_report'),
    path('reports/trend', views.report_trend, name='report_trend'),
    path('report-utils/default-date', views.report_default_date, name='report_default_date'),
]
