from django.core.management.base import BaseCommand

from registrations.export import ledger_workbook
from registrations.models import IssuedTicket


class Command(BaseCommand):
    help = 'Export every issued ticket to an Excel workbook'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Destination .xlsx file')

    def handle(self, *args, **kwargs):
        tickets = IssuedTicket.objects.order_by('id')
        ledger_workbook(tickets).save(kwargs['path'])
        self.stdout.write(self.style.SUCCESS(f"Exported {tickets.count()} tickets to {kwargs['path']}"))
