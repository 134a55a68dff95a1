"""URL routes for files app."""

from django.urls import path

from server.apps.files import views

app_name = 'files'

urlpatterns = [
    path('', views.file_list, name='list'),
    path('upload/', views.file_upload, name='upload'),
    path('<int:file_id>/download/', views.file_download, name='download'),
    path('<int:file_id>/delete/', views.file_delete, name='delete'),
]
