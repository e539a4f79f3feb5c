# digiplot_project/urls.py

from django.urls import path, include

urlpatterns = [
    # Every route belongs to the core app; the Django admin is not used.
    path('', include('core.urls')),
]
