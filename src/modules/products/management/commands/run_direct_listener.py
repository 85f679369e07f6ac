from __future__ import annotations

import structlog
from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import connection

from modules.core.middleware import bind_correlation_id
from modules.products.controller import ProductMessageController
from shared.infrastructure.tcp import JsonLineServer

logger = structlog.get_logger(__name__)


class Command(BaseCommand):
    help = "Serve the products commands over the direct TCP transport (variant B)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--host",
            default="0.0.0.0",
            help="Interface to bind (the port always comes from PORT).",
        )

    def handle(self, *args, **options):
        envs = settings.SERVICE_ENVS
        controller = ProductMessageController.default()

        server = JsonLineServer(
            (options["host"], envs.port),
            dispatcher=controller.dispatch,
            on_request=lambda request_id, cmd: bind_correlation_id(
                request_id, transport="tcp", cmd=str(cmd)
            ),
            on_disconnect=connection.close,
        )
        logger.info("listener.started", transport="tcp", host=options["host"], port=envs.port)
        self.stdout.write(
            self.style.SUCCESS(f"Products MicroService running on port: {envs.port}")
        )
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            self.stdout.write("Shutting down...")
        finally:
            server.server_close()
            logger.info("listener.stopped", transport="tcp")
