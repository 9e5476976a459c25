from django.urls import path

from .views import ContactDetailView, ContactListCreateView, ContactSummaryView

app_name = "contacts"

urlpatterns = [
    path("", ContactListCreateView.as_view(), name="contact-list"),
    path("summary/", ContactSummaryView.as_view(), name="contact-summary"),
    path("<int:pk>/", ContactDetailView.as_view(), name="contact-detail"),
]
