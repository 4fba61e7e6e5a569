# qms_core/apps.py

from django.apps import AppConfig
import logging

logger = logging.getLogger(__name__)


class QmsCoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "qms_core"
    verbose_name = "QMS core"

    def ready(self):
        # Register Django system checks only
        try:
            from .checks import workflow_rules  # noqa
        except ImportError as exc:
            logger.warning(
                "Workflow rule checks not registered: %s",
                exc,
            )
