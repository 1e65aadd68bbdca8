from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    # REST API
    path('api/', include('inventory.urls')),
    path('api/', include('users.urls')),
    path('api/', include('sales.urls')),
]
