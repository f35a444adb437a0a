from django.contrib import admin

from .models import AuditLog, Employee, Expense, MaterialPurchase, PackerEntry, SalaryPayment, Sale


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "email", "role", "salary_type", "fixed_salary", "commission_rate")
    list_filter = ("role", "salary_type")
    search_fields = ("name", "email", "phone")


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ("id", "date", "driver_name", "employee", "bags_sold", "price_per_bag", "total_amount")
    list_filter = ("date",)
    search_fields = ("driver_name", "driver_email")
    date_hierarchy = "date"


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ("id", "date", "type", "amount", "description", "reference")
    list_filter = ("type",)
    date_hierarchy = "date"


@admin.register(MaterialPurchase)
class MaterialPurchaseAdmin(admin.ModelAdmin):
    list_display = ("id", "date", "type", "quantity", "cost")
    list_filter = ("type",)


@admin.register(PackerEntry)
class PackerEntryAdmin(admin.ModelAdmin):
    list_display = ("id", "date", "packer_name", "employee", "bags_packed")


@admin.register(SalaryPayment)
class SalaryPaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "paid_date", "employee_name", "period", "fixed_amount", "commission_amount", "total_amount")
    list_filter = ("period",)


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("id", "changed_at", "entity_type", "entity_id", "action", "field", "changed_by")
    list_filter = ("entity_type", "action")
    readonly_fields = ("entity_type", "entity_id", "action", "field", "old_value", "new_value",
                       "changed_by", "changed_at", "reason", "ip_address")

    def has_change_permission(self, request, obj=None):
        return False
