from __future__ import annotations

import json

from django.core.management.base import BaseCommand
from django.core.serializers.json import DjangoJSONEncoder

from lookup_manager.manager import get_lookup_manager


class Command(BaseCommand):
    help = "Print the catalog of exposed models, and optionally enums, as JSON."

    def add_arguments(self, parser) -> None:  # type: ignore[no-untyped-def]
        parser.add_argument(
            "--enums",
            action="store_true",
            help="Include every registered enum with its entries.",
        )

    def handle(self, *args, **options) -> None:  # type: ignore[no-untyped-def]
        del args
        manager = get_lookup_manager()
        payload: dict[str, object] = {"tables": manager.get_models(None)}
        if options["enums"]:
            payload["enums"] = manager.get_enums(None)
        self.stdout.write(json.dumps(payload, cls=DjangoJSONEncoder, indent=2))
