from io import StringIO
from unittest.mock import patch

import pytest
from django.core.management import call_command

from modules.products.models import Product

pytestmark = pytest.mark.integration


class TestSeedData:
    def test_seeds_products_and_removes_some(self):
        out = StringIO()
        call_command("seed_data", stdout=out)

        assert Product.objects.count() == 10
        assert Product.objects.unavailable().count() == 2
        assert "Seed completed: products=10, unavailable=2" in out.getvalue()

    def test_is_idempotent(self):
        call_command("seed_data", stdout=StringIO())
        call_command("seed_data", "--unavailable=0", stdout=StringIO())

        assert Product.objects.count() == 10


class TestDirectListenerCommand:
    def test_binds_configured_port(self, settings):
        out = StringIO()
        with patch(
            "modules.products.management.commands.run_direct_listener.JsonLineServer"
        ) as server_cls:
            server_cls.return_value.serve_forever.side_effect = KeyboardInterrupt
            call_command("run_direct_listener", "--host=127.0.0.1", stdout=out)

        address = server_cls.call_args.args[0]
        assert address == ("127.0.0.1", settings.SERVICE_ENVS.port)
        assert f"running on port: {settings.SERVICE_ENVS.port}" in out.getvalue()
        server_cls.return_value.server_close.assert_called_once()


class TestBrokerListenerCommand:
    def test_starts_worker_on_products_queue(self):
        with patch(
            "modules.products.management.commands.run_broker_listener.app"
        ) as app:
            call_command("run_broker_listener", stdout=StringIO())

        argv = app.worker_main.call_args.kwargs["argv"]
        assert argv[0] == "worker"
        assert "--queues=products" in argv
