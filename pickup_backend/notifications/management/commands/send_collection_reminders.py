# notifications/management/commands/send_collection_reminders.py

"""
PATH: notifications/management/commands/send_collection_reminders.py

Daily job (cron / scheduler):
- Finds READY_FOR_COLLECTION orders whose pickup date is today (or --date).
- Sends each buyer one COLLECTION_REMINDER notification per day.
- Safe to re-run; orders already reminded today are skipped.
"""

from __future__ import annotations

from datetime import date

from django.core.management.base import BaseCommand, CommandError

from notifications.services import send_collection_reminders


class Command(BaseCommand):
    help = "Send pickup reminders for orders ready for collection today."

    def add_arguments(self, parser):
        parser.add_argument("--date", help="Pickup date to remind for (YYYY-MM-DD). Defaults to today.")
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Count reminders without creating notifications.",
        )

    def handle(self, *args, **options):
        on_date = None
        if options.get("date"):
            try:
                on_date = date.fromisoformat(options["date"])
            except ValueError as exc:
                raise CommandError(f"Invalid --date: {options['date']}") from exc

        dry_run = bool(options.get("dry_run"))
        sent = send_collection_reminders(on_date=on_date, dry_run=dry_run)

        label = "would be sent" if dry_run else "sent"
        self.stdout.write(self.style.SUCCESS(f"{sent} collection reminder(s) {label}."))
