from django.urls import path
from . import views

app_name = 'billing'

urlpatterns = [
    # GET    /api/customers/{id}/billing/ - Combined billing for a customer
    # POST   /api/customers/{id}/pay/     - Allocate a payment across repairs
    # POST   /api/repairs/{id}/pay/       - Pay a single repair
    path('customers/<uuid:customer_id>/billing/', views.customer_billing, name='customer-billing'),
    path('customers/<uuid:customer_id>/pay/', views.customer_pay, name='customer-pay'),
    path('repairs/<uuid:repair_id>/pay/', views.repair_pay, name='repair-pay'),
]
