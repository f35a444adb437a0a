from django.contrib import admin

from .models import BagPrice, MaterialPrice, Settings


@admin.register(Settings)
class SettingsAdmin(admin.ModelAdmin):
    list_display = ("id", "sachet_roll_cost", "sachet_roll_bags_per_roll", "packing_nylon_cost",
                    "packing_nylon_bags_per_package", "inventory_low_threshold", "updated_at")
    readonly_fields = ("updated_at",)

    def has_add_permission(self, request):
        # single row
        return not Settings.objects.exists()


@admin.register(BagPrice)
class BagPriceAdmin(admin.ModelAdmin):
    list_display = ("id", "label", "amount", "sort_order", "is_active")
    list_filter = ("is_active",)
    ordering = ("sort_order",)


@admin.register(MaterialPrice)
class MaterialPriceAdmin(admin.ModelAdmin):
    list_display = ("id", "type", "label", "cost", "bags_per_unit", "sort_order", "is_active")
    list_filter = ("type", "is_active")
    ordering = ("type", "sort_order")
