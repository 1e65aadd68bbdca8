from django.apps import AppConfig


class StorageConfig(AppConfig):
    """
    Configuration for the Local Store application.

    Holds the key-value table every entity repository reads from
    and writes to.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'storage'
    verbose_name = 'Local Store'
