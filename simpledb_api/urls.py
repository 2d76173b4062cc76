"""
URL configuration for the SimpleDB HTTP API.
"""
from django.urls import include, path

urlpatterns = [
    path('api/', include('api.urls')),
]
