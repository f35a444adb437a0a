from django.contrib import admin
from django.urls import include, path

from . import views

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/health', views.health, name='health'),
    path('api/', include('pricing.urls')),
    path('api/', include('ledger.urls')),
    path('api/', include('settlements.urls')),
]
