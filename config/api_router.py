from django.urls import include
from django.urls import path

app_name = "api"
urlpatterns = [
    path("auth/", include("rapidchat.users.api.urls")),
]
