"""
Report and optionally repair one-sided friendships.

Usage:
    django-admin repair_friendships
    django-admin repair_friendships --fix
"""

from django.core.management.base import BaseCommand

from authentication.services import IdentityService


class Command(BaseCommand):
    help = "List friendships stored in one direction only; --fix adds the missing side."

    def add_arguments(self, parser):
        parser.add_argument(
            "--fix",
            action="store_true",
            help="Add the missing reverse direction for each finding",
        )

    def handle(self, *args, **options):
        findings = IdentityService.find_asymmetric_friendships()

        if not findings:
            self.stdout.write(self.style.SUCCESS("All friendships are symmetric."))
            return

        for holder, friend in findings:
            self.stdout.write(f"{holder} -> {friend} (missing {friend} -> {holder})")

        if options["fix"]:
            repaired = IdentityService.repair_asymmetric_friendships()
            self.stdout.write(self.style.SUCCESS(f"Repaired {repaired} friendships."))
        else:
            self.stdout.write(
                self.style.WARNING(f"{len(findings)} one-sided friendships found.")
            )
