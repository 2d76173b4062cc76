"""
API URL configuration.
"""
from django.urls import path
from . import views

urlpatterns = [
    path('health/', views.HealthCheckView.as_view(), name='health-check'),

    # Store management
    path('stores/', views.StoreListView.as_view(), name='store-list'),
    path('stores/<str:name>/', views.StoreDetailView.as_view(), name='store-detail'),
    path('stores/<str:name>/inspect/', views.InspectView.as_view(), name='store-inspect'),

    # Transaction management
    path('stores/<str:name>/begin/', views.BeginTransactionView.as_view(), name='begin-transaction'),
    path('stores/<str:name>/commit/', views.CommitTransactionView.as_view(), name='commit-transaction'),
    path('stores/<str:name>/rollback/', views.RollbackTransactionView.as_view(), name='rollback-transaction'),
    path('stores/<str:name>/status/', views.TransactionStatusView.as_view(), name='transaction-status'),

    # Key-value operations
    path('stores/<str:name>/keys/<str:key>/', views.KeyView.as_view(), name='store-key'),
    path('stores/<str:name>/count/<str:value>/', views.CountView.as_view(), name='value-count'),

    # Command protocol
    path('stores/<str:name>/commands/', views.CommandView.as_view(), name='store-commands'),
]
