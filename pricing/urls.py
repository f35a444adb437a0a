from django.urls import path

from . import views

urlpatterns = [
    path('settings', views.settings_detail, name='settings'),
    path('bag-prices', views.bag_prices.collection_view(), name='bag_prices'),
    path('bag-prices/<int:pk>', views.bag_prices.detail_view(), name='bag_price_detail'),
    path('material-prices', views.material_prices.collection_view(), name='material_prices'),
    path('material-prices/<int:pk>', views.material_prices.detail_view(), name='material_price_detail'),
]
