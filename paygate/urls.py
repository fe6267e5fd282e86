from django.urls import path

from paygate.views import ContentView, PaymentSupportedView

app_name = 'paygate'

urlpatterns = [
    path('content/<str:content_type>', ContentView.as_view(), name='content'),
    path('payment/supported', PaymentSupportedView.as_view(), name='supported'),
]
