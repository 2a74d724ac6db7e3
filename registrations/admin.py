from django.contrib import admin
from django.http import HttpResponse
from django.utils.html import format_html

from .export import ledger_workbook
from .models import IssuedTicket


@admin.register(IssuedTicket)
class IssuedTicketAdmin(admin.ModelAdmin):
    list_display = ('purchase_code', 'validated_badge', 'attendee_name', 'buyer_name', 'payment_method',
                    'has_proof', 'pair_key', 'issued_at')
    list_filter = ('validated', 'payment_method', 'has_proof')
    search_fields = ('purchase_code', 'attendee_name', 'attendee_phone', 'buyer_name', 'buyer_email', 'product')
    ordering = ('-issued_at',)
    readonly_fields = ('purchase_code', 'prime_a', 'prime_b', 'product', 'pair_key', 'issued_at', 'created_at')
    actions = ['mark_as_validated', 'mark_as_unvalidated', 'export_to_excel']

    fieldsets = (
        ('Entrada', {
            'fields': ('purchase_code', 'validated', 'prime_a', 'prime_b', 'product', 'pair_key')
        }),
        ('Asistente', {
            'fields': ('attendee_name', 'attendee_phone')
        }),
        ('Comprador', {
            'fields': ('buyer_name', 'buyer_phone', 'buyer_email', 'identity_document')
        }),
        ('Pago', {
            'fields': ('total_amount', 'payment_method', 'has_proof',
                       'ocr_sender', 'ocr_receiver', 'ocr_amount', 'ocr_date_time')
        }),
        ('Tiempo', {
            'fields': ('issued_at', 'created_at'),
            'classes': ('collapse',)
        }),
    )

    def validated_badge(self, obj):
        color = 'green' if obj.validated == '1' else 'orange'
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 10px; font-weight: bold;">{}</span>',
            color, obj.get_validated_display()
        )
    validated_badge.short_description = 'Validación'
    validated_badge.admin_order_field = 'validated'

    def mark_as_validated(self, request, queryset):
        count = queryset.update(validated='1')
        self.message_user(request, f"{count} entradas marcadas como VALIDADAS.")
    mark_as_validated.short_description = "Marcar como VALIDADO"

    def mark_as_unvalidated(self, request, queryset):
        count = queryset.update(validated='0')
        self.message_user(request, f"{count} entradas marcadas como SIN VALIDAR.")
    mark_as_unvalidated.short_description = "Marcar como SIN VALIDAR"

    def export_to_excel(self, request, queryset):
        response = HttpResponse(content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
        response['Content-Disposition'] = 'attachment; filename="entradas.xlsx"'
        ledger_workbook(queryset.order_by('id')).save(response)
        return response
    export_to_excel.short_description = "Exportar a Excel"
