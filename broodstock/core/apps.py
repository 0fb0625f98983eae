from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'broodstock.core'
    verbose_name = 'Core (health, demo auth, shared helpers)'
