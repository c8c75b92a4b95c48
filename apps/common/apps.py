from django.apps import AppConfig, apps
from django.conf import settings


class CommonConfig(AppConfig):
    """
    Owns the process-wide DocumentGateway.

    The gateway is built once when Django starts and handed to services
    by the views through ``get_gateway()``.
    """

    name = 'apps.common'
    label = 'common'
    verbose_name = 'ReWear common'

    def ready(self):
        from .gateway import DocumentGateway

        self.gateway = DocumentGateway(using=settings.REWEAR_DATABASE_ALIAS)


def get_gateway():
    """Return the gateway built at startup."""
    return apps.get_app_config('common').gateway
