"""
URL configuration for the agropos project.
"""
from django.contrib import admin
from django.urls import include, path

admin.site.site_header = "Agropos administration"
admin.site.site_title = "Agropos administration"
admin.site.index_title = "Administration panel"

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/egg-collections/", include("egg_collection.api_urls", namespace="egg-collection-api")),
    path("api/notifications/", include("notifications.urls", namespace="notifications")),
]
