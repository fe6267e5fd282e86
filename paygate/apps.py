from django.apps import AppConfig


class PaygateConfig(AppConfig):
    name = 'paygate'
    verbose_name = 'Payment gate'
