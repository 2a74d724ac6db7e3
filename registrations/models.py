from django.db import models

# Ledger columns in sheet order: (model field, sheet header)
ROW_COLUMNS = [
    ('purchase_code', 'ID'),
    ('attendee_name', 'NOMBRE'),
    ('attendee_phone', 'TELEFONO'),
    ('buyer_name', 'NAME'),
    ('buyer_phone', 'PHONE'),
    ('buyer_email', 'EMAIL'),
    ('identity_document', 'CI'),
    ('prime_a', 'F1'),
    ('prime_b', 'F2'),
    ('product', 'P'),
    ('total_amount', 'TOTAL'),
    ('payment_method', 'PAGO'),
    ('has_proof', 'COMPROBANTE'),
    ('issued_at', 'HORA'),
    ('ocr_sender', 'OCR Nombre Emisor'),
    ('ocr_receiver', 'OCR Nombre Receptor'),
    ('ocr_amount', 'OCR Monto'),
    ('ocr_date_time', 'OCR Fecha/Hora'),
    ('validated', 'VALIDADO'),
]
ROW_FIELDS = [field for field, _ in ROW_COLUMNS]
ROW_HEADERS = [header for _, header in ROW_COLUMNS]


class IssuedTicket(models.Model):
    VALIDATION_CHOICES = [
        ('0', 'Sin validar'),
        ('1', 'Validado'),
    ]

    purchase_code = models.CharField(max_length=8, db_index=True)

    # Attendee
    attendee_name = models.CharField(max_length=255, blank=True, default='')
    attendee_phone = models.CharField(max_length=50, blank=True, default='')

    # Buyer
    buyer_name = models.CharField(max_length=255, blank=True, default='')
    buyer_phone = models.CharField(max_length=50, blank=True, default='')
    buyer_email = models.CharField(max_length=255, blank=True, default='')
    identity_document = models.CharField(max_length=50, blank=True, default='')

    # Prime pair and its product; the unique key makes each pair claimable once
    prime_a = models.PositiveIntegerField()
    prime_b = models.PositiveIntegerField()
    product = models.CharField(max_length=13, help_text="prime_a * prime_b")
    pair_key = models.CharField(max_length=13, unique=True, help_text="Sorted pair, e.g. 100003-100019")

    # Payment
    total_amount = models.CharField(max_length=50, blank=True, default='')
    payment_method = models.CharField(max_length=50, blank=True, default='')
    has_proof = models.CharField(max_length=2, default='No')
    issued_at = models.DateTimeField()

    # Fields read from the payment receipt
    ocr_sender = models.CharField(max_length=255, default='N/A')
    ocr_receiver = models.CharField(max_length=255, default='N/A')
    ocr_amount = models.CharField(max_length=50, default='N/A')
    ocr_date_time = models.CharField(max_length=100, default='N/A')

    validated = models.CharField(max_length=1, choices=VALIDATION_CHOICES, default='0')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.purchase_code} - {self.attendee_name}"

    class Meta:
        ordering = ['id']
