"""Management command to reconcile cached points balances with the ledger."""

from django.core.management.base import BaseCommand

from fidelman.services import ledger


class Command(BaseCommand):
    help = "Report clients whose points_balance diverges from the points ledger"

    def add_arguments(self, parser):
        parser.add_argument(
            "--client",
            type=int,
            default=None,
            help="Check a single client id",
        )
        parser.add_argument(
            "--fix",
            action="store_true",
            help="Rewrite divergent balances from the ledger",
        )

    def handle(self, *args, **options):
        divergent = ledger.divergent_clients(client_id=options["client"])

        if not divergent:
            self.stdout.write(self.style.SUCCESS("All points balances match the ledger."))
            return

        for client, total in divergent:
            self.stdout.write(
                self.style.WARNING(
                    f"Client {client.pk} ({client.email}): "
                    f"balance={client.points_balance} ledger={total}"
                )
            )
            if options["fix"]:
                ledger.rebuild_balance(client.pk)

        if options["fix"]:
            self.stdout.write(self.style.SUCCESS(f"Rebuilt {len(divergent)} balance(s)."))
        else:
            self.stdout.write(f"{len(divergent)} divergent balance(s) found. Use --fix to repair.")
