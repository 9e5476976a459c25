from django.urls import path

from .views import AppSettingView, CurrencyListCreateView, DefaultCurrencyView

app_name = "configuration"

urlpatterns = [
    path("currencies/", CurrencyListCreateView.as_view(), name="currency-list"),
    path("currencies/default/", DefaultCurrencyView.as_view(), name="currency-default"),
    path("app/", AppSettingView.as_view(), name="app-settings"),
]
