"""URL routes for files app."""

from django.urls import path

from server.apps.files import views

app_name = 'files'

urlpatterns = [
    path('share/file', views.upload, name='upload'),
    path('share/code', views.share_code, name='share-code'),
    path('share/link', views.create_link, name='create-link'),
    path('l/<str:slug>', views.resolve, name='resolve'),
]
