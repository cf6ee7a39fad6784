from django.apps import AppConfig


class BookingsConfig(AppConfig):
    name = 'apps.bookings'
    label = 'bookings'

    def ready(self) -> None:
        from apps.bookings.application.event_handlers import register_handlers
        from shared.application.message_bus import message_bus

        register_handlers(message_bus)
