from django.contrib import admin
from django.urls import path, include

from core.api import health

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", health, name="health"),

    path("api/auth/", include("accounts.urls")),
    path("api/camps/", include("hospitals.urls")),
    path("api/", include("hospitals.portal_urls")),
    path("api/donor/", include("blood.urls")),
    path("api/feedback/", include("communication.urls")),
]
