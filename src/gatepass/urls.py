"""URL configuration for the Gatepass project."""

from django.urls import path

from api.api import api

urlpatterns = [
    path("api/", api.urls),
]
