from django.contrib import admin

from .models import ReceptionistSale, Settlement, SettlementPayment, StorekeeperEntry


class SettlementPaymentInline(admin.TabularInline):
    model = SettlementPayment
    extra = 0
    readonly_fields = ("amount", "paid_by", "paid_at", "notes")

    def has_add_permission(self, request, obj=None):
        # payments go through the API so the settlement is recomputed
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Settlement)
class SettlementAdmin(admin.ModelAdmin):
    list_display = ("id", "date", "receptionist_sale", "expected_amount", "settled_amount", "remaining_balance",
                    "is_settled", "settled_at")
    list_filter = ("is_settled",)
    readonly_fields = ("settled_amount", "remaining_balance", "is_settled", "settled_at", "created_at")
    inlines = [SettlementPaymentInline]


@admin.register(ReceptionistSale)
class ReceptionistSaleAdmin(admin.ModelAdmin):
    list_display = ("id", "date", "sale_type", "driver_name", "total_bags", "expected_amount", "is_submitted")
    list_filter = ("sale_type", "is_submitted")
    readonly_fields = ("total_bags", "submitted_at")


@admin.register(StorekeeperEntry)
class StorekeeperEntryAdmin(admin.ModelAdmin):
    list_display = ("id", "date", "entry_type", "driver_name", "packer_name", "bags_count", "is_submitted")
    list_filter = ("entry_type", "is_submitted")
