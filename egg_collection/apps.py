from django.apps import AppConfig


class EggCollectionConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "egg_collection"
    label = "egg_collection"
    verbose_name = "Egg collection"
