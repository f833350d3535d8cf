from django.apps import AppConfig


class PayrollConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'payroll'
    verbose_name = 'Payroll (Work records • Monthly salary • Reports)'

    def ready(self):
        from payroll.services.registry import build_services
        self.services = build_services()
