from django.urls import path
from .views import OrdersPingView
from .views import OrdersCollectionView, OrderDetailView
app_name = "orders"

urlpatterns = [
    path("ping/", OrdersPingView.as_view(), name="ping"),
    path("", OrdersCollectionView.as_view(), name="orders-collection"),  # GET list / POST create
    path("<str:cpf>/", OrderDetailView.as_view(), name="orders-detail"),  # GET retrieve / PATCH update
]
